# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Form configuration.

FormConfig is a frozen dataclass, immutable after creation::

    config = FormConfig(
        initial_data={'email': 'ada@example.com'},
        validation={'email': [required, email]},
        on_submit=save,
    )
    form = FormState.from_config(config)

Hosts holding options as a plain mapping (camelCase names included) go
through ``FormConfig.from_mapping``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from .exceptions import ConfigurationError

ChangeCallback = Callable[[Any, Any], None]
SubmitCallback = Callable[[Any], None]

_ALIASES = {
    'initial_data': 'initial_data',
    'initialData': 'initial_data',
    'data': 'initial_data',
    'validation': 'validation',
    'validation_spec': 'validation',
    'validationSpec': 'validation',
    'on_change': 'on_change',
    'onChange': 'on_change',
    'on_submit': 'on_submit',
    'onSubmit': 'on_submit',
}


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Construction options of a form. All fields are optional.

    Attributes:
        initial_data: Seeds the data tree and triggers one full validation.
        validation: Validator spec mirroring the data tree. None validates
            nothing.
        on_change: Called with (data, errors) after every update. When set,
            the host usually owns the data (controlled mode) and feeds it
            back with ``on_external_data_replace``.
        on_submit: Called with the data tree on submit.
    """

    initial_data: Any = None
    validation: Any = None
    on_change: ChangeCallback | None = None
    on_submit: SubmitCallback | None = None

    def __post_init__(self) -> None:
        for name in ('on_change', 'on_submit'):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise ConfigurationError(
                    f"{name} must be callable, not {type(callback).__name__}"
                )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> FormConfig:
        """Build a config from a mapping of options.

        Raises:
            ConfigurationError: On unknown or repeated options.
        """
        kwargs: dict[str, Any] = {}
        for name, value in options.items():
            field_name = _ALIASES.get(name)
            if field_name is None:
                raise ConfigurationError(f"Unknown form option '{name}'")
            if field_name in kwargs:
                raise ConfigurationError(f"Form option '{field_name}' given twice")
            kwargs[field_name] = value
        return cls(**kwargs)
