"""
Unit tests for the rule-driven Validator.

Covers rule evaluation order, empty-value handling, message resolution,
lazy validation, registered errors and the supported data shapes.
"""

from unittest.mock import patch

import pytest

from fieldguard.domain.errors import RuleDefinitionError
from fieldguard.domain.validation.conditions import (
    CallbackCondition,
    FieldAbsentCondition,
    FieldPresentCondition,
)
from fieldguard.domain.validation.config import ValidatorConfig
from fieldguard.domain.validation.registry import CheckerRegistry, ConditionRegistry
from fieldguard.domain.validation.rules import STOP_VALIDATION
from fieldguard.domain.validation.validator import Validator
from tests.fakes import (
    FakeMoney,
    FakeRow,
    FakeStatusLookup,
    FakeUser,
    LoudChecker,
    SilentChecker,
    SpyCheck,
)


def explode(value):
    raise RuntimeError(f"cannot check {value}")


@pytest.fixture
def make_validator(config: ValidatorConfig, checkers: CheckerRegistry, conditions: ConditionRegistry):
    """Build validators sharing the test registries."""

    def _make(rules=None, data=None, **kwargs) -> Validator:
        kwargs.setdefault("config", config)
        kwargs.setdefault("checkers", checkers)
        kwargs.setdefault("conditions", conditions)
        return Validator(rules, data, **kwargs)

    return _make


class TestValidatorBasics:
    """Rule evaluation and error reporting."""

    def test_get_errors__all_rules_pass__returns_empty_map(self, make_validator):
        """Valid data should produce no errors."""
        validator = make_validator(
            {"name": ["required", "string"], "age": ["integer", ["range", 0, 120]]},
            {"name": "Ada", "age": 36},
        )

        assert validator.is_valid()
        assert not validator.has_errors()
        assert validator.get_errors() == {}

    def test_get_errors__checker_fails__uses_checker_message(self, make_validator):
        """A failing checker method should report its own interpolated message."""
        validator = make_validator({"age": ["integer", ["range", 0, 120]]}, {"age": 150})

        assert validator.get_errors() == {"age": "Your value should be in range of 0-120."}
        assert not validator.is_valid()

    def test_get_errors__rule_message_and_error__message_wins(self, make_validator):
        """Rule message should take precedence over rule error."""
        validator = make_validator(
            {
                "a": [["email", {"error": "Bad email."}]],
                "b": [["email", {"message": "Invalid {field}.", "error": "ignored"}]],
            },
            {"a": "nope", "b": "nope"},
        )

        assert validator.get_errors() == {"a": "Bad email.", "b": "Invalid b."}

    def test_get_errors__function_fails__uses_default_message(self, make_validator):
        """Plain functions have no message, so the default message applies."""
        validator = make_validator({"age": ["integer"]}, {"age": "abc"})

        assert validator.get_errors() == {"age": "Condition 'is_int' is not met."}

    def test_get_errors__checker_without_message__uses_default_message(self, config, make_validator):
        """A checker method without a message should fall back to the default."""
        config = config.with_overrides(checkers={"silent": SilentChecker, "loud": LoudChecker})
        validator = make_validator(
            {"odd": ["silent:odd"], "even": ["loud:even"]},
            {"odd": 2, "even": 3},
            config=config,
            checkers=CheckerRegistry(config.checkers),
        )

        assert validator.get_errors() == {
            "odd": "Condition 'silent:odd' is not met.",
            "even": "even must be even, got a value that is not.",
        }

    def test_get_errors__alias_with_arguments__prepends_alias_arguments(self, config, make_validator):
        """List aliases should expand to their target with leading arguments."""
        config = config.with_overrides(aliases={"positive": ["range", 1, None]})
        validator = make_validator({"x": ["positive"], "y": ["positive"]}, {"x": -5, "y": 5}, config=config)

        errors = validator.get_errors()
        assert "x" in errors
        assert "y" not in errors

    def test_get_errors__double_colon_separator__is_accepted(self, make_validator):
        """'checker::method' should resolve like 'checker:method'."""
        validator = make_validator({"code": [["string::length", 3]]}, {"code": "abcd"})

        assert validator.get_errors() == {"code": "Your text length must be exactly equal to 3."}

    def test_get_errors__mapping_rule_form__is_accepted(self, make_validator):
        """Mapping rules should carry check, args and options."""
        validator = make_validator(
            {"code": [{"check": "string:shorter", "args": 2, "error": "Too long: {0}."}]},
            {"code": "abcd"},
        )

        assert validator.get_errors() == {"code": "Too long: 2."}

    def test_get_errors__callable_rule__is_called_with_value(self, make_validator):
        """Callables can be used directly as rules."""
        spy = SpyCheck(result=False)
        validator = make_validator({"x": [spy]}, {"x": 7})

        assert validator.get_errors() == {"x": "Condition 'SpyCheck' is not met."}
        assert spy.calls == [7]

    def test_get_errors__fields_not_in_rules__are_ignored(self, make_validator):
        """Only fields with rules are validated."""
        validator = make_validator({"name": ["string"]}, {"name": "Ada", "extra": object()})

        assert validator.get_errors() == {}


class TestValidatorRuleOrder:
    """First failure per field and STOP_VALIDATION."""

    def test_validate__first_failure__skips_remaining_rules(self, make_validator):
        """Validation of a field should stop at its first error."""
        spy = SpyCheck()
        validator = make_validator({"age": ["integer", spy]}, {"age": "abc"})

        assert validator.get_errors() == {"age": "Condition 'is_int' is not met."}
        assert spy.calls == []

    def test_validate__stop_sentinel__halts_without_error(self, make_validator):
        """A check returning STOP_VALIDATION ends the field silently."""
        spy = SpyCheck(result=False)
        validator = make_validator({"x": [lambda value: STOP_VALIDATION, spy]}, {"x": "v"})

        assert validator.get_errors() == {}
        assert spy.calls == []

    def test_validate__other_fields__still_checked_after_failure(self, make_validator):
        """An error in one field should not stop other fields."""
        validator = make_validator(
            {"a": ["integer"], "b": ["integer"]},
            {"a": "x", "b": "y"},
        )

        assert set(validator.get_errors()) == {"a", "b"}


class TestValidatorEmptyValues:
    """Empty values only reach empty-policy conditions."""

    @pytest.mark.parametrize("empty", [None, "", [], {}])
    def test_validate__empty_value__skips_regular_rules(self, make_validator, empty):
        """Empty values should not be checked by ordinary rules."""
        validator = make_validator({"email": ["email", ["string:longer", 5]]}, {"email": empty})

        assert validator.get_errors() == {}

    def test_validate__missing_value__fails_required(self, make_validator):
        """Missing values should fail 'required' and nothing else."""
        validator = make_validator({"email": ["required", "email"]}, {})

        assert validator.get_errors() == {"email": "This value is required."}

    def test_validate__empty_string__reports_required_message_only(self, make_validator):
        """Required should report its message before any format check."""
        validator = make_validator({"email": [["required"], ["email"]]}, {"email": ""})

        assert validator.get_errors() == {"email": "This value is required."}

    @pytest.mark.parametrize("value", [0, False, 0.0])
    def test_validate__falsy_scalars__are_not_empty(self, make_validator, value):
        """0 and False are values, not missing input."""
        validator = make_validator({"x": ["required"]}, {"x": value})

        assert validator.is_valid()

    def test_validate__whitespace_string__fails_not_empty(self, make_validator):
        """Whitespace-only strings should fail not_empty."""
        validator = make_validator({"name": ["not_empty"]}, {"name": "   "})

        assert validator.get_errors() == {"name": "This value is required."}

    def test_validate__custom_empty_policy__is_used(self, make_validator):
        """An injected empty policy decides which rules run on empty values."""
        spy = SpyCheck(result=False)
        validator = make_validator(
            {"x": [spy]},
            {"x": None},
            empty_policy=lambda rule: True,
        )

        assert "x" in validator.get_errors()
        assert spy.calls == [None]

    def test_validate__empty_conditions_config__exempts_named_rule(self, config, make_validator):
        """Names added to empty_conditions should run on empty values."""
        config = config.with_overrides(empty_conditions={"is_none"})
        validator = make_validator({"x": ["null"]}, {"x": None}, config=config)

        assert validator.is_valid()


class TestValidatorLazyValidation:
    """Validation is cached until data or rules change."""

    def test_get_errors__called_twice__validates_once(self, make_validator):
        """Repeated queries should reuse the computed errors."""
        spy = SpyCheck()
        validator = make_validator({"x": [spy]}, {"x": 1})

        assert validator.get_errors() == validator.get_errors()
        assert validator.is_valid()
        assert spy.calls == [1]

    def test_set_data__changed__revalidates(self, make_validator):
        """New data should trigger a new validation."""
        spy = SpyCheck()
        validator = make_validator({"x": [spy]}, {"x": 1})
        validator.get_errors()

        validator.set_data({"x": 2})
        validator.get_errors()

        assert spy.calls == [1, 2]

    def test_set_data__unchanged__keeps_cached_errors(self, make_validator):
        """Equal data should not reset the validator."""
        spy = SpyCheck()
        validator = make_validator({"x": [spy]}, {"x": 1})
        validator.get_errors()

        validator.set_data({"x": 1})
        validator.get_errors()

        assert spy.calls == [1]

    def test_set_rules__unchanged__keeps_cached_errors(self, make_validator):
        """Equal rules should not reset the validator."""
        spy = SpyCheck()
        rules = {"x": [spy]}
        validator = make_validator(rules, {"x": 1})
        validator.get_errors()

        validator.set_rules(dict(rules))
        validator.get_errors()

        assert spy.calls == [1]

    def test_set_rules__changed__revalidates(self, make_validator):
        """New rules should be applied on the next query."""
        validator = make_validator({"x": ["integer"]}, {"x": "a"})
        assert not validator.is_valid()

        validator.set_rules({"x": ["string"]})

        assert validator.is_valid()
        assert validator.get_rules() == {"x": ["string"]}

    def test_set_rules__rule_list_changed_in_place__recompiles(self, make_validator):
        """Rules mutated by the caller and set again should be applied."""
        rules = {"age": ["integer"]}
        validator = make_validator(rules, {"age": 150})
        assert validator.is_valid()

        rules["age"].append(["range", 0, 120])
        validator.set_rules(rules)

        assert validator.get_errors() == {"age": "Your value should be in range of 0-120."}
        assert validator.get_rules() == {"age": ["integer", ["range", 0, 120]]}

    def test_set_rules__caller_mutation_without_setter__not_seen(self, make_validator):
        """Stored rules should not change behind the validator's back."""
        rules = {"age": ["integer"]}
        validator = make_validator(rules, {"age": 150})

        rules["age"].append(["range", 0, 120])

        assert validator.get_rules() == {"age": ["integer"]}
        assert validator.is_valid()

    def test_set_data__nested_value_changed_in_place__revalidates(self, make_validator):
        """Data mutated by the caller and set again should be validated again."""
        data = {"codes": ["a", "b", "c"]}
        validator = make_validator({"codes": [lambda codes: len(codes) <= 3]}, data)
        assert validator.is_valid()

        data["codes"].append("d")
        validator.set_data(data)

        assert "codes" in validator.get_errors()
        assert validator.get_data() == {"codes": ["a", "b", "c", "d"]}

    def test_reset__forces_revalidation(self, make_validator):
        """reset() should drop the cached errors."""
        spy = SpyCheck()
        validator = make_validator({"x": [spy]}, {"x": 1})
        validator.get_errors()

        validator.reset()
        validator.get_errors()

        assert spy.calls == [1, 1]


class TestValidatorRegisteredErrors:
    """Errors registered outside the rule set."""

    def test_register_error__overrides_rule_error(self, make_validator):
        """Registered errors should win over rule errors for the same field."""
        validator = make_validator({"email": ["email"]}, {"email": "nope"})
        validator.register_error("email", "Email is already taken.")

        assert validator.get_errors() == {"email": "Email is already taken."}

    def test_register_error__makes_valid_data_invalid(self, make_validator):
        """A registered error alone should make the validator invalid."""
        validator = make_validator({"email": ["email"]}, {"email": "a@b.io"})
        validator.register_error("name", "Name is reserved.")

        assert not validator.is_valid()
        assert validator.get_errors() == {"name": "Name is reserved."}

    def test_register_error__survives_data_and_rule_changes(self, make_validator):
        """set_data and set_rules should keep registered errors."""
        validator = make_validator({"x": ["integer"]}, {"x": 1})
        validator.register_error("x", "Registered.")

        validator.set_data({"x": 2})
        validator.set_rules({"x": ["numeric"]})

        assert validator.get_errors() == {"x": "Registered."}

    def test_flush_registered__restores_rule_errors(self, make_validator):
        """Flushing registered errors should leave only rule errors."""
        validator = make_validator({"email": ["email"]}, {"email": "nope"})
        validator.register_error("email", "Taken.")

        validator.flush_registered()

        assert validator.get_errors() == {"email": "Must be a valid email address."}


class TestValidatorFailingChecks:
    """Exceptions raised by checks."""

    def test_evaluate__check_raises__logs_and_fails_with_default_message(self, config, make_validator):
        """Check exceptions should be logged and reported as a failure."""
        config = config.with_overrides(functions={"explode": explode})
        validator = make_validator({"x": ["explode"]}, {"x": "v"}, config=config)

        with patch("fieldguard.domain.validation.validator.logger") as mock_logger:
            errors = validator.get_errors()

        assert errors == {"x": "Condition 'explode' is not met."}
        mock_logger.error.assert_called_once_with(
            "condition_failed",
            field="x",
            condition="explode",
            error="cannot check v",
            error_type="RuntimeError",
        )

    def test_evaluate__check_raises__rule_message_still_applies(self, config, make_validator):
        """Rule messages should apply to failures caused by exceptions."""
        config = config.with_overrides(functions={"explode": explode})
        validator = make_validator(
            {"x": [["explode", {"error": "Broken."}]]},
            {"x": "v"},
            config=config,
        )

        with patch("fieldguard.domain.validation.validator.logger"):
            assert validator.get_errors() == {"x": "Broken."}


class TestValidatorClassRules:
    """(target, method) rules."""

    def test_class_method_rule__class_target__is_instantiated(self, make_validator):
        """Class targets should be instantiated and their method called."""
        validator = make_validator(
            {"status": [[(FakeStatusLookup, "exists"), ["active", "closed"]]]},
            {"status": "deleted"},
        )

        assert validator.get_errors() == {"status": "Condition 'FakeStatusLookup:exists' is not met."}

    def test_class_method_rule__registered_name__resolves_target(self, make_validator):
        """Registered class names should be usable as 'name:method'."""
        validator = make_validator(
            {"status": [["status:exists", ["active"], {"error": "Unknown status."}]]},
            {"status": "deleted"},
        )

        assert validator.get_errors() == {"status": "Unknown status."}

    def test_class_method_rule__instance_target__passes(self, make_validator):
        """Instances should be called directly."""
        validator = make_validator(
            {"status": [[(FakeStatusLookup(), "exists"), ["active"]]]},
            {"status": "active"},
        )

        assert validator.is_valid()

    def test_checker_pair__checker_class__is_used_as_checker(self, make_validator):
        """Checker classes in a pair should be used with their messages."""
        validator = make_validator({"n": [[(LoudChecker, "even")]]}, {"n": 3})

        assert validator.get_errors() == {"n": "n must be even, got a value that is not."}


class TestValidatorDataShapes:
    """Entities, mapping-like rows and packable values."""

    def test_set_data__entity__reads_fields(self, make_validator):
        """Entities should be read through get_fields()."""
        validator = make_validator({"email": ["email"]}, FakeUser(name="Ada", email="nope"))

        assert validator.get_data() == {"name": "Ada", "email": "nope"}
        assert validator.get_errors() == {"email": "Must be a valid email address."}

    def test_set_data__mapping_like__reads_keys(self, make_validator):
        """Objects with keys() and item access should be accepted."""
        validator = make_validator({"age": ["integer"]}, FakeRow(age=3))

        assert validator.get_data() == {"age": 3}
        assert validator.is_valid()

    def test_set_data__unsupported__raises_type_error(self, make_validator):
        """Unsupported data shapes should be rejected."""
        with pytest.raises(TypeError):
            make_validator({"x": ["integer"]}, 42)

    def test_get_value__packable__is_unwrapped(self, make_validator):
        """Packable values should be checked in their packed form."""
        validator = make_validator({"price": [["number:higher", 10]]}, {"price": FakeMoney(5)})

        assert validator.get_value("price") == 5
        assert validator.get_errors() == {"price": "Your value should be higher than 10."}

    def test_get_value__missing__returns_default(self, make_validator):
        """Missing and None values should yield the default."""
        validator = make_validator(data={"a": None})

        assert validator.get_value("a", "fallback") == "fallback"
        assert validator.get_value("b", 3) == 3
        assert validator.get_value("b") is None


class TestValidatorConditions:
    """Conditional-skip predicates and context."""

    def test_condition__context_callback__controls_rule(self, make_validator, conditions):
        """Rules should run only while their condition is met."""
        conditions.register("is_admin", CallbackCondition(lambda v: v.get_context() == "admin"))
        rules = {"nick": [["string:shorter", 3, {"condition": "is_admin"}]]}

        admin = make_validator(rules, {"nick": "longname"}).set_context("admin")
        guest = make_validator(rules, {"nick": "longname"}).set_context("guest")

        assert admin.get_context() == "admin"
        assert admin.get_errors() == {"nick": "Enter text shorter or equal to 3."}
        assert guest.is_valid()

    def test_condition__skipped_rule__continues_with_next_rule(self, make_validator, conditions):
        """A skipped rule should not stop the remaining rules."""
        conditions.register("has_phone", FieldPresentCondition("phone"))
        validator = make_validator(
            {"email": [["email", {"condition": "has_phone"}], ["string:longer", 10]]},
            {"email": "bad"},
        )

        assert validator.get_errors() == {"email": "Your text must be longer or equal to 10."}

    def test_condition__field_absent__applies_rule(self, make_validator, conditions):
        """FieldAbsentCondition should be met while the other field is empty."""
        conditions.register("no_phone", FieldAbsentCondition("phone"))
        rules = {"email": [["required", {"condition": "no_phone"}]]}

        assert not make_validator(rules, {"phone": ""}).is_valid()
        assert make_validator(rules, {"phone": "555"}).is_valid()


class TestValidatorFieldDependencies:
    """Checks reading other fields."""

    def test_required_with_any__other_present__requires_value(self, make_validator):
        """required:with_any should fail on empty values when a dependency is present."""
        rules = {"phone": [["required:with_any", ["sms", "call"]], ["string:longer", 3]]}

        assert make_validator(rules, {"sms": True}).get_errors() == {"phone": "This value is required."}
        assert make_validator(rules, {}).is_valid()

    def test_required_without_all__no_alternatives__requires_value(self, make_validator):
        """required:without_all should require the value when every alternative is missing."""
        rules = {"email": [["required:without_all", ["phone", "fax"]]]}

        assert not make_validator(rules, {}).is_valid()
        assert make_validator(rules, {"fax": "1"}).is_valid()

    def test_match__different_values__reports_both_fields(self, make_validator):
        """match should compare against another field."""
        rules = {"confirm": [["match", "password"]]}

        assert make_validator(rules, {"password": "a1", "confirm": "a2"}).get_errors() == {
            "confirm": "Fields confirm and password do not match."
        }
        assert make_validator(rules, {"password": "a1", "confirm": "a1"}).is_valid()


class TestValidatorRuleDefinitionErrors:
    """Bad rules fail when assigned."""

    @pytest.mark.parametrize(
        "rules",
        [
            {"x": ["nope"]},
            {"x": ["unknown:method"]},
            {"x": ["string:nope"]},
            {"x": ["type:check"]},
            {"x": ["string:shorter"]},
            {"x": [["integer", 1]]},
            {"x": "email"},
            {"x": [[]]},
            {"x": [{"check": "email", "severity": "high"}]},
            {"x": [["email", {"error": 5}]]},
            {"x": [["email", {"condition": "unregistered"}]]},
            {"x": [42]},
        ],
    )
    def test_set_rules__invalid__raises_rule_definition_error(self, make_validator, rules):
        """Unresolvable or malformed rules should raise RuleDefinitionError."""
        with pytest.raises(RuleDefinitionError):
            make_validator(rules)

    def test_set_rules__invalid__keeps_previous_rules(self, make_validator):
        """A failed assignment should leave the validator unchanged."""
        validator = make_validator({"x": ["integer"]}, {"x": 1})

        with pytest.raises(RuleDefinitionError):
            validator.set_rules({"x": ["nope"]})

        assert validator.get_rules() == {"x": ["integer"]}
        assert validator.is_valid()

    def test_set_rules__alias_cycle__raises(self, config, make_validator):
        """Aliases pointing at each other should be rejected."""
        config = config.with_overrides(aliases={"a": "b", "b": "a"})

        with pytest.raises(RuleDefinitionError, match="Alias cycle"):
            make_validator({"x": ["a"]}, config=config)

    def test_rule_definition_error__names_field(self, make_validator):
        """Errors should identify the field holding the bad rule."""
        with pytest.raises(RuleDefinitionError) as exc_info:
            make_validator({"age": ["nope"]})

        assert exc_info.value.field == "age"
        assert "Invalid rule for field 'age'" in exc_info.value.message


class TestValidatorDefaults:
    """Validator built without explicit collaborators."""

    def test_validator__no_arguments__uses_default_config(self):
        """A bare validator should resolve the built-in aliases."""
        validator = Validator({"email": ["required", "email"]}, {"email": "a@example.com"})

        assert validator.is_valid()
        assert validator.config == ValidatorConfig.default()
