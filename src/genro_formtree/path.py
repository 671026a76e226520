# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path addressing and copy-on-write access to nested trees.

A path is a tuple of keys: strings address keyed nodes (dicts), integers
address list positions. Hosts may also pass dotted strings.

Path Syntax:
    - Dotted paths: 'address.zip'
    - Positional: '#0' (first item), '#-1' (last item, read only)
    - Combined: 'phones.#1.number'

Trees are never mutated. ``set_in`` rebuilds every container along the path
and shares all other branches with the input tree.

Example:
    >>> data = {'address': {'zip': ''}, 'name': 'Ada'}
    >>> new = set_in(data, 'address.zip', '90210')
    >>> get_in(new, ('address', 'zip'))
    '90210'
    >>> new['name'] is data['name']
    True
    >>> data['address']['zip']
    ''
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Union

from .exceptions import ShapeMismatchError

Key = Union[str, int]
Path = tuple[Key, ...]
PathLike = Union[str, Iterable[Key], None]


def _parse_path_segment(segment: str) -> Key:
    """Parse a dotted path segment, detecting positional index (#N) syntax."""
    if segment.startswith('#'):
        rest = segment[1:]
        if rest.lstrip('-').isdigit():
            return int(rest)
    return segment


def parse_path(path: PathLike) -> Path:
    """Normalize a path to a tuple of keys.

    Args:
        path: Dotted string, sequence of keys, or None for the root.

    Returns:
        Tuple of keys. Empty tuple for the root.

    Example:
        >>> parse_path('phones.#1.number')
        ('phones', 1, 'number')
        >>> parse_path(['address', 'zip'])
        ('address', 'zip')
    """
    if path is None:
        return ()
    if isinstance(path, str):
        if not path:
            return ()
        return tuple(_parse_path_segment(part) for part in path.split('.'))
    return tuple(path)


def format_path(path: PathLike) -> str:
    """Render a path in dotted syntax, the inverse of ``parse_path``."""
    return '.'.join(
        f'#{key}' if isinstance(key, int) else str(key)
        for key in parse_path(path)
    )


def as_index(key: Key) -> int | None:
    """Convert a key to a list index, or None if it is not positional."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def get_in(tree: Any, path: PathLike, default: Any = None) -> Any:
    """Get the value at path, or default if any step cannot be taken.

    A missing key, an out of range position, or a leaf where a descent was
    expected all produce ``default``.
    """
    current = tree
    for key in parse_path(path):
        if isinstance(current, Mapping):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, (list, tuple)):
            index = as_index(key)
            if index is None or not -len(current) <= index < len(current):
                return default
            current = current[index]
        else:
            return default
    return current


def _set_step(node: Any, keys: Path, value: Any, depth: int) -> Any:
    if depth == len(keys):
        return value

    key = keys[depth]

    if node is None or not isinstance(node, (Mapping, list, tuple)):
        # Missing or leaf: autocreate a container suited to the key
        node = [] if isinstance(key, int) and not isinstance(key, bool) else {}

    if isinstance(node, Mapping):
        child = _set_step(node.get(key), keys, value, depth + 1)
        updated = dict(node)
        updated[key] = child
        return updated

    index = as_index(key)
    if index is None:
        raise ShapeMismatchError(
            f"Key '{key}' cannot address a list node",
            path=keys[:depth + 1],
        )
    if index < 0:
        if -index > len(node):
            raise ShapeMismatchError(
                f"Position #{index} out of range (0-{len(node) - 1})",
                path=keys[:depth + 1],
            )
        index = len(node) + index

    items = list(node)
    if index >= len(items):
        items.extend([None] * (index + 1 - len(items)))
    items[index] = _set_step(items[index], keys, value, depth + 1)
    return tuple(items) if isinstance(node, tuple) else items


def set_in(tree: Any, path: PathLike, value: Any) -> Any:
    """Return a copy of tree with the node at path replaced by value.

    Ancestors along the path are rebuilt; every other branch is shared.
    Missing intermediate nodes are created as dicts, or as lists when the
    next key is an integer. Lists are padded with None up to the written
    position.

    Args:
        tree: The source tree. Never modified.
        path: Location to write. Empty path returns value itself.
        value: The new node.

    Returns:
        The new tree.

    Raises:
        ShapeMismatchError: If a non positional key addresses a list.
    """
    keys = parse_path(path)
    return _set_step(tree, keys, value, 0)


class Lens:
    """A get/set pair focused on one path.

    Example:
        >>> zip_lens = Lens('address.zip')
        >>> zip_lens.set({}, '90210')
        {'address': {'zip': '90210'}}
        >>> zip_lens.over({'address': {'zip': 'a'}}, str.upper)
        {'address': {'zip': 'A'}}
    """

    __slots__ = ('path',)

    def __init__(self, path: PathLike) -> None:
        self.path: Path = parse_path(path)

    def __repr__(self) -> str:
        return f"Lens({format_path(self.path)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lens):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def get(self, tree: Any, default: Any = None) -> Any:
        return get_in(tree, self.path, default)

    def set(self, tree: Any, value: Any) -> Any:
        return set_in(tree, self.path, value)

    def over(self, tree: Any, function: Callable[[Any], Any]) -> Any:
        """Set the focused node to ``function(current_value)``."""
        return set_in(tree, self.path, function(get_in(tree, self.path)))
