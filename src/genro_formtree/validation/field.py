# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Single field validation."""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import InvalidValidatorError, ValidatorFailedError
from ..node import Chain, Single, ValidatorEntry
from ..path import PathLike, format_path, parse_path

logger = logging.getLogger('genro_formtree')


def as_entry(raw: Any) -> ValidatorEntry:
    """Convert a raw rule spec into a validator entry.

    Args:
        raw: A callable, a non-empty list/tuple of callables, or an entry.

    Returns:
        Single for a callable, Chain for a sequence.

    Raises:
        InvalidValidatorError: If raw is empty or holds a non-callable.
    """
    if isinstance(raw, (Single, Chain)):
        return raw
    if callable(raw):
        return Single(raw)
    if isinstance(raw, (list, tuple)):
        if not raw:
            raise InvalidValidatorError("Rule list must not be empty")
        for rule in raw:
            if not callable(rule):
                raise InvalidValidatorError(
                    f"Rule list items must be callable, got {type(rule).__name__}"
                )
        return Chain(tuple(raw))
    raise InvalidValidatorError(
        f"Validator must be callable or list of callables, not {type(raw).__name__}"
    )


def _coerce(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    return str(value)


def _run(rule: Any, value: str, path: tuple) -> Any:
    try:
        return rule(value)
    except Exception as exc:
        name = getattr(rule, '__name__', repr(rule))
        logger.error("Validator %s raised on '%s'", name, format_path(path))
        raise ValidatorFailedError(
            f"Validator {name} raised {type(exc).__name__} on '{format_path(path)}'",
            path=path,
        ) from exc


def validate_field(
    value: Any,
    entry: ValidatorEntry | None,
    path: PathLike = (),
) -> str | None:
    """Apply a validator entry to a field value.

    Args:
        value: The raw field value. None is validated as ''.
        entry: Single, Chain, or None for an unvalidated field.
        path: Field location, used only in failure reports.

    Returns:
        The error message, or None if the value passes (or there is no entry).
        A Single returns its rule's truthy result verbatim. A Chain runs every
        rule in order and returns the first truthy result.

    Raises:
        ValidatorFailedError: If a rule raises.
    """
    if entry is None:
        return None

    keys = parse_path(path)
    text = _coerce(value)

    if isinstance(entry, Single):
        message = _run(entry.function, text, keys)
        return message if message else None

    messages = [_run(rule, text, keys) for rule in entry.functions]
    failures = [message for message in messages if message]
    if failures:
        return failures[0]
    return None
