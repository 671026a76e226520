# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for FormState, FormConfig and error tree helpers."""

import logging

import pytest

from genro_formtree import (
    ConfigurationError,
    FieldView,
    FormConfig,
    FormSnapshot,
    FormState,
    InvalidValidatorError,
    ShapeMismatchError,
    ValidatorFailedError,
    first_error,
    has_errors,
    iter_errors,
    merge_errors,
    validate_tree,
)
from genro_formtree.validation import integer, required


def is_non_empty(value):
    return 'required' if not value else None


def is_email_shaped(value):
    return None if '@' in value and '.' in value else 'invalid email'


class Recorder:
    """Collects the arguments of every call."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


class TestFormStateInit:
    """Tests for FormState construction."""

    def test_defaults(self):
        """Test an unseeded form starts empty and valid."""
        form = FormState()
        assert form.data == {}
        assert form.errors == {}
        assert form.is_valid is True

    def test_seed_triggers_validation(self):
        """Test initial data is validated at construction."""
        form = FormState(
            initial_data={'address': {'zip': ''}},
            validation={'address': {'zip': is_non_empty}},
        )
        assert form.data == {'address': {'zip': ''}}
        assert form.errors == {'address': {'zip': 'required'}}
        assert form.is_valid is False

    def test_no_notification_on_init(self):
        """Test construction does not call on_change."""
        on_change = Recorder()
        FormState(initial_data={'a': ''}, validation={'a': is_non_empty}, on_change=on_change)
        assert on_change.calls == []

    def test_invalid_spec_fails_fast(self):
        """Test a malformed validator spec is rejected at construction."""
        with pytest.raises(InvalidValidatorError):
            FormState(validation={'a': 'not a rule'})

    def test_seed_shape_mismatch(self):
        """Test seed data disagreeing with the validators is rejected."""
        with pytest.raises(ShapeMismatchError):
            FormState(initial_data={'phones': {}}, validation={'phones': [{'n': integer}]})

    def test_non_callable_callback(self):
        """Test callbacks must be callable."""
        with pytest.raises(ConfigurationError, match="on_submit must be callable"):
            FormState(on_submit='nope')

    def test_from_config(self):
        """Test FormState.from_config wires every option."""
        on_submit = Recorder()
        config = FormConfig(
            initial_data={'name': ''},
            validation={'name': is_non_empty},
            on_submit=on_submit,
        )
        form = FormState.from_config(config)
        assert form.errors == {'name': 'required'}
        form.on_submit()
        assert on_submit.calls == [({'name': ''},)]

    def test_repr(self):
        """Test repr shows data and error count."""
        form = FormState(initial_data={'a': ''}, validation={'a': is_non_empty})
        assert repr(form) == "FormState(data={'a': ''}, errors=1)"


class TestFieldChange:
    """Tests for FormState.on_field_change."""

    def test_end_to_end_email(self):
        """Test the email field moves from error to cleared."""
        form = FormState(
            initial_data={},
            validation={'email': [is_non_empty, is_email_shaped]},
        )
        snapshot = form.on_field_change(['email'], '')
        assert snapshot.errors == {'email': 'required'}
        snapshot = form.on_field_change(['email'], 'a@b.com')
        assert snapshot.errors == {'email': None}
        assert snapshot.data == {'email': 'a@b.com'}

    def test_nested_field(self):
        """Test a nested change clears the nested error."""
        form = FormState(
            initial_data={'address': {'zip': ''}},
            validation={'address': {'zip': is_non_empty}},
        )
        snapshot = form.on_field_change(['address', 'zip'], '90210')
        assert snapshot.errors == {'address': {'zip': None}}
        assert snapshot.data == {'address': {'zip': '90210'}}

    def test_dotted_path(self):
        """Test dotted string paths are accepted."""
        form = FormState(validation={'address': {'zip': is_non_empty}})
        form.on_field_change('address.zip', '')
        assert form.errors == {'address': {'zip': 'required'}}

    def test_unvalidated_field_never_errors(self):
        """Test a field without rules leaves errors untouched."""
        form = FormState(
            initial_data={'email': ''},
            validation={'email': is_non_empty},
        )
        before = form.errors
        for value in ('', 'x', 'anything'):
            snapshot = form.on_field_change(['nickname'], value)
            assert 'nickname' not in snapshot.errors
            assert snapshot.errors is before
        assert form.data['nickname'] == 'anything'

    def test_clearing_overwrites_stale_message(self):
        """Test a passing value writes None over the previous message."""
        form = FormState(validation={'name': is_non_empty})
        form.on_field_change('name', '')
        assert form.errors == {'name': 'required'}
        form.on_field_change('name', 'Ada')
        assert form.errors == {'name': None}

    def test_only_changed_field_validated(self):
        """Test sibling fields keep their previous errors."""
        form = FormState(
            initial_data={'a': '', 'b': ''},
            validation={'a': is_non_empty, 'b': is_non_empty},
        )
        form.on_field_change('a', 'x')
        assert form.errors == {'a': None, 'b': 'required'}

    def test_list_field(self):
        """Test list positions are validated against positional rules."""
        form = FormState(validation={'phones': [{'number': integer}, {'number': integer}]})
        form.on_field_change(('phones', 1, 'number'), 'abc')
        assert form.data == {'phones': [None, {'number': 'abc'}]}
        assert form.errors == {'phones': [None, {'number': 'not an integer'}]}

    def test_snapshots_are_immutable(self):
        """Test earlier snapshots are not affected by later changes."""
        form = FormState(validation={'name': is_non_empty})
        first = form.on_field_change('name', '')
        second = form.on_field_change('name', 'Ada')
        assert first.data == {'name': ''}
        assert first.errors == {'name': 'required'}
        assert second.errors == {'name': None}

    def test_unchanged_branches_shared(self):
        """Test branches off the changed path are shared between snapshots."""
        form = FormState(
            initial_data={'billing': {'zip': '1'}, 'shipping': {'zip': '2'}},
            validation={'billing': {'zip': is_non_empty}, 'shipping': {'zip': is_non_empty}},
        )
        before = form.snapshot
        after = form.on_field_change('billing.zip', '3')
        assert after.data['shipping'] is before.data['shipping']
        assert after.errors['shipping'] is before.errors['shipping']

    def test_notifies_on_change(self):
        """Test on_change receives the fresh data and errors."""
        on_change = Recorder()
        form = FormState(validation={'name': is_non_empty}, on_change=on_change)
        form.on_field_change('name', '')
        form.on_field_change('other', 'x')
        assert on_change.calls == [
            ({'name': ''}, {'name': 'required'}),
            ({'name': '', 'other': 'x'}, {'name': 'required'}),
        ]

    def test_events_applied_in_order(self):
        """Test consecutive changes build on each other."""
        form = FormState()
        form.on_field_change('a', '1')
        form.on_field_change('b', '2')
        form.on_field_change('a', '3')
        assert form.data == {'a': '3', 'b': '2'}

    def test_shape_mismatch_raises(self):
        """Test a path disagreeing with the validator tree raises."""
        form = FormState(validation={'phones': [{'number': integer}]})
        with pytest.raises(ShapeMismatchError):
            form.on_field_change(('phones', 'number'), '1')
        assert form.data == {}

    def test_digit_keys_under_list_rules(self):
        """Test string positions addressing a list node write into a list."""
        form = FormState(validation={'phones': [{'number': integer}]})
        snapshot = form.on_field_change(['phones', '0', 'number'], '1')
        assert snapshot.data == {'phones': [{'number': '1'}]}
        assert snapshot.errors == {'phones': [{'number': None}]}
        form.on_field_change('phones.0.number', 'x')
        assert form.errors == {'phones': [{'number': 'not an integer'}]}
        assert form.errors == validate_tree(form.data, form.validators)

    def test_digit_keys_outside_list_rules_stay_labels(self):
        """Test digit keys not under a list node remain dict keys."""
        form = FormState(validation={'phones': [{'number': integer}]})
        form.on_field_change(['codes', '0'], 'x')
        assert form.data == {'codes': {'0': 'x'}}

    def test_keyed_data_under_list_rules_raises(self):
        """Test data holding a dict where rules expect a list raises."""
        with pytest.raises(ShapeMismatchError, match="holds a keyed node"):
            FormState(
                initial_data={'phones': {'0': {'number': '1'}}},
                validation={'phones': [{'number': integer}]},
            )

    def test_shape_mismatch_logged(self, caplog):
        """Test shape mismatches are logged before propagating."""
        form = FormState(validation={'email': is_non_empty})
        with caplog.at_level(logging.ERROR, logger='genro_formtree'):
            with pytest.raises(ShapeMismatchError):
                form.on_field_change(('email', 'local'), 'x')
        assert "Shape mismatch on field 'email.local'" in caplog.text

    def test_raising_validator_surfaces(self):
        """Test a raising rule is not swallowed and state is unchanged."""
        def broken(value):
            raise ValueError('boom')

        form = FormState(validation={'name': broken})
        with pytest.raises(ValidatorFailedError):
            form.on_field_change('name', 'x')
        assert form.data == {}

    def test_debug_logging(self, caplog):
        """Test transitions are logged at debug level."""
        form = FormState(validation={'name': is_non_empty})
        with caplog.at_level(logging.DEBUG, logger='genro_formtree'):
            form.on_field_change('name', '')
            form.on_field_change('free', 'x')
        assert "Field 'name' changed, error='required'" in caplog.text
        assert "Field 'free' changed, not validated" in caplog.text


class TestFullIncrementalAgreement:
    """Tests that field-by-field and full validation agree."""

    def test_every_field_in_sequence(self):
        """Test changing every field equals one validate_tree call."""
        spec = {
            'email': [is_non_empty, is_email_shaped],
            'address': {'zip': is_non_empty, 'city': is_non_empty},
            'phones': [{'number': integer}, {'number': integer}],
        }
        final = {
            'email': 'nope',
            'address': {'zip': '90210', 'city': ''},
            'phones': [{'number': '12'}, {'number': 'x'}],
            'nickname': 'ada',
        }
        fields = [
            ('email',), ('address', 'zip'), ('address', 'city'),
            ('phones', 0, 'number'), ('phones', 1, 'number'), ('nickname',),
        ]
        form = FormState(validation=spec)
        for path in fields:
            value = final
            for key in path:
                value = value[key]
            form.on_field_change(path, value)

        assert form.data == final
        assert form.errors == validate_tree(final, spec)

    def test_data_omitting_declared_field(self):
        """Test a declared field absent from the data is absent from both."""
        spec = {'a': is_non_empty, 'b': is_non_empty}
        form = FormState(validation=spec)
        form.on_field_change('a', 'x')
        assert form.errors == {'a': None}
        assert validate_tree({'a': 'x'}, spec) == form.errors

    def test_branch_without_validated_fields(self):
        """Test a present branch whose rules have no data stays out of both."""
        spec = {'address': {'zip': is_non_empty}, 'phones': [None, {'number': integer}]}
        form = FormState(validation=spec)
        form.on_field_change('address.city', 'Rome')
        form.on_field_change(('phones', 0, 'number'), '1')
        assert form.errors == {}
        assert validate_tree(form.data, spec) == {}


class TestExternalDataReplace:
    """Tests for FormState.on_external_data_replace."""

    def test_replace_revalidates(self):
        """Test new data is adopted and validated."""
        on_change = Recorder()
        form = FormState(validation={'name': is_non_empty}, on_change=on_change)
        snapshot = form.on_external_data_replace({'name': ''})
        assert snapshot == FormSnapshot({'name': ''}, {'name': 'required'})
        assert on_change.calls == [({'name': ''}, {'name': 'required'})]

    def test_equal_data_ignored(self):
        """Test structurally equal data is a no-op."""
        on_change = Recorder()
        form = FormState(
            initial_data={'a': {'b': ''}},
            validation={'a': {'b': is_non_empty}},
            on_change=on_change,
        )
        before = form.snapshot
        after = form.on_external_data_replace({'a': {'b': ''}})
        assert after.data is before.data
        assert on_change.calls == []

    def test_fresh_results_win_over_previous(self):
        """Test stale messages are replaced by fresh results."""
        form = FormState(validation={'a': is_non_empty, 'b': is_non_empty})
        form.on_field_change('a', '')
        assert form.errors == {'a': 'required'}
        form.on_external_data_replace({'a': 'x', 'b': ''})
        assert form.errors == {'a': None, 'b': 'required'}

    def test_none_keeps_current_state(self):
        """Test replacing with None leaves data and errors as they are."""
        on_change = Recorder()
        form = FormState(
            initial_data={'a': 'x'},
            validation={'a': is_non_empty},
            on_change=on_change,
        )
        before = form.snapshot
        after = form.on_external_data_replace(None)
        assert after == before
        assert form.data == {'a': 'x'}
        assert form.errors == {'a': None}
        assert on_change.calls == []

    def test_controlled_mode_round_trip(self):
        """Test a host feeding on_change data back does not loop."""
        calls = []

        def on_change(data, errors):
            calls.append(data)
            form.on_external_data_replace(data)

        form = FormState(validation={'name': is_non_empty}, on_change=on_change)
        form.on_field_change('name', 'Ada')
        assert calls == [{'name': 'Ada'}]


class TestSubmit:
    """Tests for FormState.on_submit."""

    def test_submit_forwards_data_with_errors(self):
        """Test the submit handler runs even when errors are present."""
        on_submit = Recorder()
        form = FormState(
            initial_data={'email': ''},
            validation={'email': is_non_empty},
            on_submit=on_submit,
        )
        snapshot = form.on_submit()
        assert snapshot.errors == {'email': 'required'}
        assert snapshot.is_valid is False
        assert on_submit.calls == [({'email': ''},)]

    def test_submit_empty_form(self):
        """Test fields never entered carry no message on submit."""
        form = FormState(validation={'email': is_non_empty})
        assert form.on_submit().errors == {}

    def test_submit_recomputes_from_scratch(self):
        """Test submit drops messages kept by earlier merges."""
        form = FormState(initial_data={'b': ''}, validation={'a': is_non_empty, 'b': is_non_empty})
        form.on_external_data_replace({'a': 'x'})
        assert form.errors == {'a': None, 'b': 'required'}
        form.on_submit()
        assert form.errors == {'a': None}

    def test_submit_valid_form(self):
        """Test a valid form is submitted with its data."""
        on_submit = Recorder()
        form = FormState(validation={'name': is_non_empty}, on_submit=on_submit)
        form.on_field_change('name', 'Ada')
        assert form.on_submit().is_valid is True
        assert on_submit.calls == [({'name': 'Ada'},)]

    def test_submit_without_handler(self):
        """Test submit works with no handler registered."""
        form = FormState(initial_data={'a': 'x'})
        assert form.on_submit().data == {'a': 'x'}

    def test_submit_notifies_change(self):
        """Test change observers see the recomputed errors."""
        on_change = Recorder()
        form = FormState(initial_data={'a': ''}, validation={'a': is_non_empty}, on_change=on_change)
        form.on_submit()
        assert on_change.calls == [({'a': ''}, {'a': 'required'})]


class TestFormReadApi:
    """Tests for field views and error listings."""

    def test_field_view(self):
        """Test field returns value and error for rendering."""
        form = FormState(
            initial_data={'address': {'zip': ''}},
            validation={'address': {'zip': is_non_empty}},
        )
        assert form.field('address.zip') == FieldView(('address', 'zip'), '', 'required')
        assert form.field('missing') == FieldView(('missing',), '', None)

    def test_field_view_of_branch_has_no_error(self):
        """Test a branch path carries no message of its own."""
        form = FormState(
            initial_data={'address': {'zip': ''}},
            validation={'address': {'zip': is_non_empty}},
        )
        assert form.field('address').error is None

    def test_validation_errors(self):
        """Test messages are listed by dotted path."""
        form = FormState(
            initial_data={'email': '', 'phones': [{'number': 'x'}]},
            validation={'email': required, 'phones': [{'number': integer}]},
        )
        assert form.validation_errors == {
            'email': "required",
            'phones.#0.number': "not an integer",
        }


class TestSubscriptions:
    """Tests for change subscriptions."""

    def test_subscribe_and_unsubscribe(self):
        """Test subscribers are notified until removed."""
        seen = Recorder()
        form = FormState()
        form.subscribe('audit', seen)
        assert form.subscribers == ['audit']
        form.on_field_change('a', '1')
        assert form.unsubscribe('audit') is True
        assert form.unsubscribe('audit') is False
        form.on_field_change('a', '2')
        assert seen.calls == [({'a': '1'}, {})]

    def test_subscribers_after_on_change(self):
        """Test on_change runs before subscribers."""
        order = []
        form = FormState(on_change=lambda data, errors: order.append('on_change'))
        form.subscribe('first', lambda data, errors: order.append('first'))
        form.subscribe('second', lambda data, errors: order.append('second'))
        form.on_field_change('a', '1')
        assert order == ['on_change', 'first', 'second']

    def test_subscribe_non_callable(self):
        """Test non-callable subscribers are rejected."""
        with pytest.raises(TypeError, match="must be callable"):
            FormState().subscribe('bad', 42)


class TestFormConfig:
    """Tests for FormConfig."""

    def test_defaults(self):
        """Test every option defaults to None."""
        config = FormConfig()
        assert config.initial_data is None
        assert config.validation is None
        assert config.on_change is None
        assert config.on_submit is None

    def test_from_mapping_camel_case(self):
        """Test host style option names are accepted."""
        on_change = Recorder()
        config = FormConfig.from_mapping({
            'initialData': {'a': ''},
            'validationSpec': {'a': is_non_empty},
            'onChange': on_change,
        })
        assert config.initial_data == {'a': ''}
        assert config.on_change is on_change

    def test_from_mapping_unknown_option(self):
        """Test unknown options are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown form option 'colour'"):
            FormConfig.from_mapping({'colour': 'red'})

    def test_from_mapping_repeated_option(self):
        """Test aliases of the same option cannot be combined."""
        with pytest.raises(ConfigurationError, match="given twice"):
            FormConfig.from_mapping({'onChange': print, 'on_change': print})

    def test_frozen(self):
        """Test config is immutable."""
        config = FormConfig()
        with pytest.raises(AttributeError):
            config.validation = {}


class TestErrorTree:
    """Tests for error tree helpers."""

    def test_merge_fresh_wins(self):
        """Test fresh values replace previous ones, None included."""
        previous = {'a': 'old', 'b': {'c': 'old'}, 'keep': 'x'}
        fresh = {'a': None, 'b': {'c': 'new', 'd': None}}
        assert merge_errors(previous, fresh) == {
            'a': None,
            'b': {'c': 'new', 'd': None},
            'keep': 'x',
        }

    def test_merge_lists_take_fresh_length(self):
        """Test lists merge by position with the fresh length."""
        previous = [{'n': 'old'}, 'gone', 'gone']
        fresh = [{'m': None}, None]
        assert merge_errors(previous, fresh) == [{'n': 'old', 'm': None}, None]

    def test_merge_kind_change(self):
        """Test a fresh node of another kind replaces the previous one."""
        assert merge_errors({'a': ['x']}, {'a': {'b': None}}) == {'a': {'b': None}}

    def test_iter_errors(self):
        """Test only fields in error are listed, in tree order."""
        errors = {'a': None, 'b': {'c': 'bad'}, 'l': [None, 'worse']}
        assert list(iter_errors(errors)) == [(('b', 'c'), 'bad'), (('l', 1), 'worse')]

    def test_has_and_first_error(self):
        """Test has_errors and first_error."""
        assert has_errors({'a': None, 'b': [None]}) is False
        assert first_error({'a': None}) is None
        assert has_errors({'a': {'b': 'x'}}) is True
        assert first_error({'a': {'b': 'x'}, 'c': 'y'}) == (('a', 'b'), 'x')
