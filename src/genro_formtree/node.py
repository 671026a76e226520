# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree node kinds shared by data, validator and error trees.

Data and error trees are plain Python values (dict, list, scalars), so hosts
can build and compare them freely. ``kind_of`` classifies such a value as a
leaf, a list node or a keyed node.

Validator trees are compiled once into explicit node classes:

- KeyedNode: named children, mirrors a dict in the data tree
- ListNode: positional children, mirrors a list in the data tree
- Single / Chain: the validator entry attached to one field

Example:
    >>> kind_of({'zip': ''})
    <NodeKind.KEYED: 'keyed'>
    >>> not_blank = lambda value: None if value.strip() else "required"
    >>> digits = lambda value: None if value.isdigit() else "digits only"
    >>> len(Chain((not_blank, digits)).functions)
    2
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

Rule = Callable[[str], Any]


class NodeKind(str, Enum):
    """Structural kind of a tree node."""

    LEAF = 'leaf'
    LIST = 'list'
    KEYED = 'keyed'


def kind_of(value: Any) -> NodeKind:
    """Return the structural kind of a plain data or error tree value.

    Strings are leaves even though they are sequences.
    """
    if isinstance(value, Mapping):
        return NodeKind.KEYED
    if isinstance(value, (list, tuple)):
        return NodeKind.LIST
    return NodeKind.LEAF


@dataclass(frozen=True, slots=True)
class Single:
    """A field validated by one rule."""

    function: Rule

    @property
    def functions(self) -> tuple[Rule, ...]:
        return (self.function,)


@dataclass(frozen=True, slots=True)
class Chain:
    """A field validated by an ordered, non-empty sequence of rules.

    Every rule runs; only the first message is surfaced.
    """

    functions: tuple[Rule, ...]

    def __post_init__(self) -> None:
        if not self.functions:
            raise ValueError("Chain requires at least one rule")


@dataclass(frozen=True, slots=True)
class KeyedNode:
    """Validator node whose children are addressed by name."""

    children: dict[str, ValidatorTree] = field(default_factory=dict)

    kind = NodeKind.KEYED

    def child(self, key: Any) -> ValidatorTree | None:
        return self.children.get(key)


@dataclass(frozen=True, slots=True)
class ListNode:
    """Validator node whose children are addressed by position.

    A ``None`` child means the position carries no validation.
    """

    children: tuple[ValidatorTree | None, ...] = ()

    kind = NodeKind.LIST

    def child(self, index: int) -> ValidatorTree | None:
        if -len(self.children) <= index < len(self.children):
            return self.children[index]
        return None


ValidatorEntry = Union[Single, Chain]
ValidatorTree = Union[KeyedNode, ListNode, Single, Chain]


def is_entry(node: Any) -> bool:
    """True if node is a validator entry (a leaf of the validator tree)."""
    return isinstance(node, (Single, Chain))
