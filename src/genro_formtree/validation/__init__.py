# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Validation package - rules, resolution, field and tree validation.

The package is organized into:
- field: Apply one validator entry to one value
- resolve: Compile a validator spec and look up the entry for a path
- tree: Validate a whole data tree into a mirrored error tree
- rules: Built-in rule functions

Example:
    >>> from genro_formtree.validation import validate_tree, required, email
    >>> validate_tree({'email': ''}, {'email': [required, email]})
    {'email': 'required'}
"""

from .field import as_entry, validate_field
from .resolve import compile_validators, normalize_path, resolve
from .rules import (
    Validator,
    email,
    integer,
    max_length,
    min_length,
    number,
    required,
)
from .tree import check_path_shape, validate_tree

__all__ = [
    # Field and tree validation
    "as_entry",
    "check_path_shape",
    "compile_validators",
    "normalize_path",
    "resolve",
    "validate_field",
    "validate_tree",
    # Rules
    "Validator",
    "email",
    "integer",
    "max_length",
    "min_length",
    "number",
    "required",
]
