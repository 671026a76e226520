# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Full tree validation.

The walk follows the data tree's realized shape: a field is validated when
the data holds its key (or position) and the validator tree has a rule for
it. Declared fields absent from the data are left out of the error tree, as
are data keys with no validator, so one full pass records exactly what
changing every present field one at a time would record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import ShapeMismatchError
from ..node import (
    Chain,
    KeyedNode,
    ListNode,
    NodeKind,
    Single,
    ValidatorTree,
    is_entry,
    kind_of,
)
from ..path import Path, PathLike, as_index, format_path, parse_path
from .field import validate_field
from .resolve import compile_validators

# Marks a subtree that produced no entry at all
_ABSENT = object()


def _expected_kind(node: ValidatorTree) -> NodeKind:
    if is_entry(node):
        return NodeKind.LEAF
    return node.kind


def _check_kind(data: Any, node: ValidatorTree, path: Path) -> None:
    if data is None:
        return
    expected = _expected_kind(node)
    actual = kind_of(data)
    if actual is not expected:
        raise ShapeMismatchError(
            f"'{format_path(path)}' holds a {actual.value} node, "
            f"validators expect a {expected.value} node",
            path=path,
        )


def _validate(data: Any, node: ValidatorTree, path: Path) -> Any:
    _check_kind(data, node, path)

    if is_entry(node):
        return validate_field(data, node, path)

    if data is None:
        return _ABSENT

    if isinstance(node, KeyedNode):
        errors = {}
        for key, child in node.children.items():
            if key not in data:
                continue
            result = _validate(data[key], child, path + (key,))
            if result is not _ABSENT:
                errors[key] = result
        return errors if errors else _ABSENT

    results = [
        _validate(data[index], child, path + (index,)) if child is not None else _ABSENT
        for index, child in zip(range(len(data)), node.children)
    ]
    while results and results[-1] is _ABSENT:
        results.pop()
    if not results:
        return _ABSENT
    return [None if result is _ABSENT else result for result in results]


def validate_tree(data: Any, validators: Any) -> Any:
    """Validate a whole data tree, building an error tree of the same shape.

    Args:
        data: The data tree (dict, list or leaf). None is an empty form.
        validators: Compiled validator tree, or a raw spec to compile.

    Returns:
        Error tree. Every validated field present in the data maps to its
        message or None. Branches hold the errors of their children and are
        left out when none of their fields is present. List nodes hold one
        result per position up to the last validated one, None where a
        position has no result.

    Raises:
        ShapeMismatchError: If a data node's kind disagrees with the
            validator node at the same path.
        ValidatorFailedError: If a rule raises.

    Example:
        >>> validate_tree({'address': {'zip': ''}}, {'address': {'zip': required}})
        {'address': {'zip': 'required'}}
        >>> validate_tree({}, {'address': {'zip': required}})
        {}
    """
    if not isinstance(validators, (KeyedNode, ListNode, Single, Chain)):
        validators = compile_validators(validators)
    errors = _validate(data, validators, ())
    if errors is _ABSENT:
        return [] if isinstance(validators, ListNode) else {}
    return errors

def check_path_shape(data: Any, validators: ValidatorTree, path: PathLike) -> None:
    """Check that data and validators agree on node kinds along one path.

    Nodes missing on either side are not checked.

    Raises:
        ShapeMismatchError: At the first node whose kinds disagree.
    """
    keys = parse_path(path)
    node: ValidatorTree | None = validators
    current = data

    for depth in range(len(keys) + 1):
        if node is None or current is None:
            return
        _check_kind(current, node, keys[:depth])
        if depth == len(keys) or is_entry(node):
            return

        key = keys[depth]
        if isinstance(node, ListNode):
            index = as_index(key)
            node = node.child(index) if index is not None else None
            in_range = index is not None and -len(current) <= index < len(current)
            current = current[index] if in_range else None
        else:
            node = node.child(key)
            current = current.get(key) if isinstance(current, Mapping) else None
