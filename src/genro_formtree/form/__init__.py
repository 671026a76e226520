# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Form package - session state coordinator.

The package is organized into:
- core: FormState with field change, external replace and submit transitions
- subscription: Registry of extra change observers

Example:
    >>> from genro_formtree import FormState
    >>> form = FormState(validation={'name': required}, on_submit=print)
    >>> form.on_field_change('name', 'Ada').errors
    {'name': None}
"""

from .core import FieldView, FormSnapshot, FormState
from .subscription import SubscriberCallback, SubscriptionMixin

__all__ = [
    "FieldView",
    "FormSnapshot",
    "FormState",
    "SubscriberCallback",
    "SubscriptionMixin",
]
