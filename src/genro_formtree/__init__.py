# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-FormTree - Path-addressed form state with mirrored validation trees.

A lightweight, zero-dependency library keeping a nested data record, its
validator spec and its error record consistent as fields change and on
submission (Genro Kyō).
"""

__version__ = "0.1.0"

from .config import FormConfig
from .error_tree import first_error, has_errors, iter_errors, merge_errors
from .exceptions import (
    ConfigurationError,
    FormTreeError,
    InvalidValidatorError,
    ShapeMismatchError,
    ValidatorFailedError,
)
from .form import FieldView, FormSnapshot, FormState
from .node import Chain, KeyedNode, ListNode, NodeKind, Single, kind_of
from .path import Lens, format_path, get_in, parse_path, set_in
from .validation import (
    compile_validators,
    resolve,
    validate_field,
    validate_tree,
)

__all__ = [
    # Core classes
    "FormState",
    "FormSnapshot",
    "FieldView",
    "FormConfig",
    # Paths and lenses
    "Lens",
    "get_in",
    "set_in",
    "parse_path",
    "format_path",
    # Validator tree
    "NodeKind",
    "kind_of",
    "KeyedNode",
    "ListNode",
    "Single",
    "Chain",
    "compile_validators",
    "resolve",
    "validate_field",
    "validate_tree",
    # Error trees
    "merge_errors",
    "iter_errors",
    "has_errors",
    "first_error",
    # Exceptions
    "FormTreeError",
    "ConfigurationError",
    "InvalidValidatorError",
    "ShapeMismatchError",
    "ValidatorFailedError",
]
