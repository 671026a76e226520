# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""FormState - owner of the data and error trees of one form session.

FormState keeps a data tree and its mirrored error tree consistent while the
host reports events:

    - **on_field_change**: one field changed; copy-on-write update of the
      data tree, then only that field is revalidated
    - **on_external_data_replace**: the host pushed a new data tree
      (controlled mode); full revalidation merged over the previous errors
    - **on_submit**: full revalidation, then the data is forwarded to the
      submit handler, errors or not

Every operation is synchronous and returns the new FormSnapshot. Trees are
never mutated, so snapshots handed out earlier stay valid.

Example:
    >>> form = FormState(validation={'email': [required, email]})
    >>> form.on_field_change('email', '').errors
    {'email': 'required'}
    >>> form.on_field_change('email', 'ada@example.com').errors
    {'email': None}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config import ChangeCallback, FormConfig, SubmitCallback
from ..error_tree import has_errors, iter_errors, merge_errors
from ..exceptions import ShapeMismatchError
from ..node import ValidatorTree
from ..path import Path, PathLike, format_path, get_in, parse_path, set_in
from ..validation import (
    check_path_shape,
    compile_validators,
    normalize_path,
    resolve,
    validate_field,
    validate_tree,
)
from .subscription import SubscriberCallback, SubscriptionMixin

logger = logging.getLogger('genro_formtree')


@dataclass(frozen=True, slots=True)
class FormSnapshot:
    """The (data, errors) pair produced by one transition."""

    data: Any
    errors: Any

    @property
    def is_valid(self) -> bool:
        """True if no field carries a message."""
        return not has_errors(self.errors)


@dataclass(frozen=True, slots=True)
class FieldView:
    """What the host projects onto one control and its alert label.

    ``value`` defaults to '' for fields not in the data tree yet.
    """

    path: Path
    value: Any
    error: str | None


class FormState(SubscriptionMixin):
    """Coordinator of a form session.

    Attributes:
        data: Current data tree.
        errors: Current error tree.
        validators: Compiled validator tree.

    Example:
        >>> form = FormState(
        ...     initial_data={'address': {'zip': ''}},
        ...     validation={'address': {'zip': required}},
        ... )
        >>> form.errors
        {'address': {'zip': 'required'}}
        >>> form.on_field_change('address.zip', '90210').errors
        {'address': {'zip': None}}
    """

    __slots__ = (
        '_data', '_errors', '_validators',
        '_on_change', '_on_submit', '_subscribers',
    )

    def __init__(
        self,
        initial_data: Any = None,
        validation: Any = None,
        on_change: ChangeCallback | None = None,
        on_submit: SubmitCallback | None = None,
    ) -> None:
        """Initialize a FormState.

        Args:
            initial_data: Optional seed data. When given, the whole tree is
                validated immediately so pre-existing errors show up without
                a change event.
            validation: Validator spec mirroring the data tree. Fields with
                no rule are never validated.
            on_change: Called with (data, errors) after every update.
            on_submit: Called with the data tree on submit.

        Raises:
            ConfigurationError: On non-callable callbacks or a malformed
                validator spec.
            ShapeMismatchError: If initial_data disagrees with the validator spec.
        """
        config = FormConfig(initial_data, validation, on_change, on_submit)
        self._validators: ValidatorTree = compile_validators(config.validation)
        self._on_change = config.on_change
        self._on_submit = config.on_submit
        self._subscribers: dict[str, SubscriberCallback] = {}

        if config.initial_data is not None:
            self._data = config.initial_data
            self._errors = validate_tree(self._data, self._validators)
            logger.debug(
                "Form seeded, %d field(s) in error",
                sum(1 for _ in iter_errors(self._errors)),
            )
        else:
            self._data = {}
            self._errors = {}

    @classmethod
    def from_config(cls, config: FormConfig) -> FormState:
        """Create a FormState from a FormConfig."""
        return cls(
            initial_data=config.initial_data,
            validation=config.validation,
            on_change=config.on_change,
            on_submit=config.on_submit,
        )

    def __repr__(self) -> str:
        count = sum(1 for _ in iter_errors(self._errors))
        return f"FormState(data={self._data!r}, errors={count})"

    # ==================== Read API ====================

    @property
    def data(self) -> Any:
        return self._data

    @property
    def errors(self) -> Any:
        return self._errors

    @property
    def validators(self) -> ValidatorTree:
        return self._validators

    @property
    def snapshot(self) -> FormSnapshot:
        return FormSnapshot(self._data, self._errors)

    @property
    def is_valid(self) -> bool:
        """True if the current error tree holds no message.

        Reflects the last validation performed, which after field changes
        covers only the touched fields.
        """
        return not has_errors(self._errors)

    @property
    def validation_errors(self) -> dict[str, str]:
        """Messages of the fields in error, keyed by dotted path.

        Example:
            >>> form.validation_errors
            {'address.zip': 'required', 'phones.#0': 'not an integer'}
        """
        return {format_path(path): message for path, message in iter_errors(self._errors)}

    def field(self, path: PathLike) -> FieldView:
        """Return value and error of one field for rendering."""
        keys = parse_path(path)
        value = get_in(self._data, keys)
        error = get_in(self._errors, keys)
        return FieldView(
            path=keys,
            value='' if value is None else value,
            error=error if isinstance(error, str) else None,
        )

    # ==================== Transitions ====================

    def on_field_change(self, path: PathLike, raw_value: Any) -> FormSnapshot:
        """Apply a single field change and revalidate that field only.

        Args:
            path: Field location (tuple of keys or dotted string). Digit
                keys that address a list node of the validator tree are
                taken as positions.
            raw_value: The new raw input value.

        Returns:
            The new snapshot. A field without a validator leaves the error
            tree untouched; a validated field gets its message, or None when
            the value passes, overwriting any previous message.

        Raises:
            ShapeMismatchError: If the path disagrees with the validator tree.
            ValidatorFailedError: If a rule raises.
        """
        keys = normalize_path(self._validators, path)
        try:
            data = set_in(self._data, keys, raw_value)
            entry = resolve(self._validators, keys)
            check_path_shape(data, self._validators, keys)
        except ShapeMismatchError:
            logger.error("Shape mismatch on field '%s'", format_path(keys))
            raise

        if entry is None:
            logger.debug("Field '%s' changed, not validated", format_path(keys))
            return self._commit(data, self._errors)

        message = validate_field(get_in(data, keys), entry, keys)
        logger.debug("Field '%s' changed, error=%r", format_path(keys), message)
        return self._commit(data, set_in(self._errors, keys, message))

    def on_external_data_replace(self, new_data: Any) -> FormSnapshot:
        """Adopt a data tree pushed by the host.

        Nothing happens when new_data is None or equals the current data.
        Otherwise the whole tree is revalidated and the result merged over
        the previous error tree, fresh results winning.
        """
        if new_data is None:
            logger.debug("External data is None, ignored")
            return self.snapshot
        if new_data == self._data:
            logger.debug("External data unchanged, ignored")
            return self.snapshot

        errors = merge_errors(self._errors, validate_tree(new_data, self._validators))
        logger.debug("External data replaced")
        return self._commit(new_data, errors)

    def on_submit(self) -> FormSnapshot:
        """Revalidate the whole tree and forward the data to the submit handler.

        The handler is called even when errors are present; deciding what to
        do with an invalid submission is left to the host.
        """
        errors = validate_tree(self._data, self._validators)
        snapshot = self._commit(self._data, errors)
        logger.debug("Form submitted, valid=%s", snapshot.is_valid)
        if self._on_submit is not None:
            self._on_submit(self._data)
        return snapshot

    # ==================== Internals ====================

    def _commit(self, data: Any, errors: Any) -> FormSnapshot:
        self._data = data
        self._errors = errors
        if self._on_change is not None:
            self._on_change(data, errors)
        self._notify_subscribers(data, errors)
        return FormSnapshot(data, errors)
