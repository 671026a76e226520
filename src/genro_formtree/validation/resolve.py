# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Validator spec compilation and per-path resolution.

A host describes validation with plain values that mirror the data tree::

    {
        'email': [required, email],          # Chain
        'address': {'zip': required},        # nested Single
        'phones': [{'number': integer}],     # ListNode, by position
        'tags': [[required], None, email],   # ListNode of Chain, -, Single
    }

A list made only of callables is a rule chain for one field; any other list
is a list node addressed by position.

``compile_validators`` turns this into explicit node classes once, so shape
problems surface at construction time instead of on the first keystroke.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import InvalidValidatorError, ShapeMismatchError
from ..node import (
    Chain,
    KeyedNode,
    ListNode,
    Single,
    ValidatorEntry,
    ValidatorTree,
    is_entry,
)
from ..path import Path, PathLike, as_index, format_path, parse_path
from .field import as_entry


def _is_rule_list(spec: list | tuple) -> bool:
    return all(callable(item) for item in spec)


def _compile(spec: Any, path: Path) -> ValidatorTree | None:
    """Compile one spec node, returning None for subtrees with no rule."""
    if spec is None:
        return None
    if isinstance(spec, (KeyedNode, ListNode, Single, Chain)):
        return spec
    if callable(spec):
        return Single(spec)

    if isinstance(spec, Mapping):
        children: dict[str, ValidatorTree] = {}
        for key, child_spec in spec.items():
            compiled = _compile(child_spec, path + (key,))
            if compiled is not None:
                children[key] = compiled
        return KeyedNode(children) if children else None

    if isinstance(spec, (list, tuple)):
        if not spec:
            raise InvalidValidatorError(
                f"Empty validator list at '{format_path(path)}'"
            )
        if _is_rule_list(spec):
            return as_entry(spec)
        # Anything else is positional: one subtree, rule or None per item
        items = [_compile(item, path + (index,)) for index, item in enumerate(spec)]
        while items and items[-1] is None:
            items.pop()
        return ListNode(tuple(items)) if items else None

    raise InvalidValidatorError(
        f"Invalid validator at '{format_path(path)}': {type(spec).__name__}"
    )


def compile_validators(spec: Any = None) -> ValidatorTree:
    """Compile a raw validator spec into a validator tree.

    Args:
        spec: Nested dict/list mirroring the data tree, with a callable or a
            non-empty list of callables at each validated field. None means
            no field is validated.

    Returns:
        The root node. Subtrees without any rule are pruned; an empty spec
        compiles to an empty KeyedNode (or ListNode for a list spec).

    Raises:
        InvalidValidatorError: If a node is neither a tree nor a rule.
    """
    compiled = _compile(spec, ())
    if compiled is not None:
        return compiled
    if isinstance(spec, (list, tuple)):
        return ListNode()
    return KeyedNode()


def resolve(validators: ValidatorTree | None, path: PathLike) -> ValidatorEntry | None:
    """Look up the validator entry registered for a field.

    Args:
        validators: Compiled validator tree.
        path: Field location.

    Returns:
        Single or Chain, or None when no rule is registered at path.

    Raises:
        ShapeMismatchError: If a key has the wrong kind for the node it
            addresses, if the path descends below a validated field, or if
            the path stops on a branch of the validator tree.
    """
    keys = parse_path(path)
    node: ValidatorTree | None = validators

    for depth, key in enumerate(keys):
        if node is None:
            return None
        here = keys[:depth + 1]
        if is_entry(node):
            raise ShapeMismatchError(
                f"'{format_path(keys[:depth])}' is a field, "
                f"cannot descend into '{key}'",
                path=here,
            )
        if isinstance(node, ListNode):
            index = as_index(key)
            if index is None:
                raise ShapeMismatchError(
                    f"Key '{key}' cannot address list node "
                    f"'{format_path(keys[:depth])}'",
                    path=here,
                )
            node = node.child(index)
        else:
            if isinstance(key, int) and not isinstance(key, bool):
                raise ShapeMismatchError(
                    f"Position #{key} cannot address keyed node "
                    f"'{format_path(keys[:depth])}'",
                    path=here,
                )
            node = node.child(key)

    if node is None or is_entry(node):
        return node
    raise ShapeMismatchError(
        f"'{format_path(keys)}' is a {node.kind.value} node, not a field",
        path=keys,
    )


def normalize_path(validators: ValidatorTree | None, path: PathLike) -> Path:
    """Turn keys that address list nodes into integer positions.

    Paths coming from a host are often all strings ('phones.0.number').
    Where the validator tree has a list node, digit keys become positions,
    so the data written at that path is a list, not a dict keyed '0'.
    Keys below the validator tree are left as given.

    Example:
        >>> validators = compile_validators({'phones': [{'number': integer}]})
        >>> normalize_path(validators, ('phones', '0', 'number'))
        ('phones', 0, 'number')
    """
    keys = parse_path(path)
    node: ValidatorTree | None = validators
    normalized = []

    for key in keys:
        if node is None or is_entry(node):
            node = None
        elif isinstance(node, ListNode):
            index = as_index(key)
            if index is not None:
                key = index
                node = node.child(index)
            else:
                node = None
        else:
            node = node.child(key) if not isinstance(key, int) else None
        normalized.append(key)
    return tuple(normalized)
