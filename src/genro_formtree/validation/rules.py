# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Stock rules for form fields.

A rule takes the field value, already coerced to a string, and returns the
message to show under the control, or None when the value is accepted.
Rules with a parameter are factories: ``min_length(3)`` builds the rule.

Messages are short lowercase labels, meant to be shown next to the field
they belong to::

    >>> required('')
    'required'
    >>> min_length(3)('ab')
    'at least 3 characters'

Rules are attached in the validator spec, alone or as a list::

    validation = {
        'email': [required, email],
        'phones': [{'number': [required, integer]}],
    }
"""

from __future__ import annotations

import re
from typing import Callable

Validator = Callable[[str], 'str | None']


# ==================== Presence ====================

def required(value: str) -> str | None:
    """Reject empty and blank values."""
    if value.strip():
        return None
    return "required"


# ==================== Length ====================

def min_length(n: int) -> Validator:
    """Build a rule rejecting values shorter than n characters.

    An empty value passes, so optional fields stay optional; combine with
    ``required`` when the field is mandatory.
    """

    def rule(value: str) -> str | None:
        if value and len(value) < n:
            return f"at least {n} characters"
        return None

    return rule


def max_length(n: int) -> Validator:
    """Build a rule rejecting values longer than n characters."""

    def rule(value: str) -> str | None:
        if len(value) > n:
            return f"at most {n} characters"
        return None

    return rule


# ==================== Format ====================

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


def email(value: str) -> str | None:
    """Reject values that are not shaped like an email address.

    Empty values pass.
    """
    if value and not _EMAIL_RE.match(value):
        return "invalid email"
    return None


# ==================== Numbers ====================

def integer(value: str) -> str | None:
    """Reject values that do not parse as an integer. Empty values pass."""
    if not value:
        return None
    try:
        int(value.strip())
    except ValueError:
        return "not an integer"
    return None


def number(value: str) -> str | None:
    """Reject values that do not parse as a number. Empty values pass."""
    if not value:
        return None
    try:
        float(value.strip())
    except ValueError:
        return "not a number"
    return None
