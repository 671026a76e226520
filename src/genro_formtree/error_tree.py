# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Helpers for error trees.

An error tree mirrors the data tree: dicts for keyed nodes, lists for list
nodes, and at each validated field either None or a message string.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

from .path import Path


def merge_errors(previous: Any, fresh: Any) -> Any:
    """Merge a fresh error tree over a previous one.

    Keyed nodes merge key by key and lists merge position by position, taking
    the fresh length. Everywhere else the fresh value wins, None included, so
    a field that now passes loses its stale message.
    """
    if isinstance(previous, Mapping) and isinstance(fresh, Mapping):
        merged = dict(previous)
        for key, value in fresh.items():
            merged[key] = merge_errors(previous[key], value) if key in previous else value
        return merged

    if isinstance(previous, (list, tuple)) and isinstance(fresh, (list, tuple)):
        return [
            merge_errors(previous[index], value) if index < len(previous) else value
            for index, value in enumerate(fresh)
        ]

    return fresh


def iter_errors(errors: Any, prefix: Path = ()) -> Iterator[tuple[Path, str]]:
    """Yield (path, message) for every field currently in error.

    Fields are visited in tree order, keyed nodes by insertion order.
    """
    if isinstance(errors, Mapping):
        for key, child in errors.items():
            yield from iter_errors(child, prefix + (key,))
    elif isinstance(errors, (list, tuple)):
        for index, child in enumerate(errors):
            yield from iter_errors(child, prefix + (index,))
    elif errors:
        yield prefix, errors


def has_errors(errors: Any) -> bool:
    """True if at least one field carries a message."""
    return next(iter_errors(errors), None) is not None


def first_error(errors: Any) -> tuple[Path, str] | None:
    """Return (path, message) of the first field in error, or None."""
    return next(iter_errors(errors), None)
