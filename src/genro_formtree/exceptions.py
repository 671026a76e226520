# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FormTree exceptions.

Validation messages are data stored in the error tree. The exceptions here
signal configuration defects only: a malformed validator spec, a path whose
shape disagrees with the validator tree, or a validator that raised.
"""

from __future__ import annotations

from typing import Any


class FormTreeError(Exception):
    """Base exception for FormTree errors."""

    pass


class ConfigurationError(FormTreeError):
    """Raised when form options are invalid."""

    pass


class InvalidValidatorError(ConfigurationError):
    """Raised when a validator spec node is neither a tree nor a rule."""

    pass


class ShapeMismatchError(ConfigurationError):
    """Raised when a list node meets a keyed node (or the other way round).

    Attributes:
        path: Key tuple locating the node where the shapes disagree.
    """

    def __init__(self, message: str, path: tuple[Any, ...] = ()) -> None:
        super().__init__(message)
        self.path = path


class ValidatorFailedError(FormTreeError):
    """Raised when a validator function raises instead of returning.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, path: tuple[Any, ...] = ()) -> None:
        super().__init__(message)
        self.path = path
