"""Tests for the shared schema pipeline: membership sets, peers, rename, options."""

import pytest

from schemachain import UNDEFINED, ValidationState, number, string
from schemachain.exceptions import SchemaDefinitionError
from tests.helpers import codes


# ============================================================================
# ALLOWED / REJECTED SETS
# ============================================================================


class TestMembership:
    """allow/deny/valid/invalid and the presence modifiers."""

    def test_last_call_wins_deny(self):
        assert codes(number().allow(5).deny(5).validate(5)) == ["base.invalid"]

    def test_last_call_wins_allow(self):
        assert number().deny(5).allow(5).validate(5) is None

    def test_allowed_value_skips_rules(self):
        assert number().min(10).allow(1).validate(1) is None

    def test_valid_restricts_to_enumeration(self):
        schema = string().valid("a", "b")
        assert schema.validate("a") is None
        result = schema.validate("c")
        assert codes(result) == ["base.validate.allowOnly"]
        assert "a, b" in result.message

    def test_rules_still_run_after_allow_only_without_early_abort(self):
        schema = string().valid("abcdef").min(5)
        assert codes(schema.validate("zz")) == ["base.validate.allowOnly"]
        assert codes(schema.validate("zz", {"early_abort": False})) == ["base.validate.allowOnly", "string.min"]

    def test_invalid_does_not_restrict(self):
        schema = string().invalid("x")
        assert schema.validate("y") is None
        assert codes(schema.validate("x")) == ["base.invalid"]

    def test_missing_value_is_optional_by_default(self):
        assert number().validate(UNDEFINED) is None

    def test_required_rejects_missing_value(self):
        result = number().required().validate(UNDEFINED)
        assert codes(result) == ["base.invalid"]
        assert result.message == "the value of value is not allowed to be undefined"

    def test_optional_undoes_required(self):
        schema = number().required().optional()
        assert schema.validate(UNDEFINED) is None
        assert "required" not in schema.modifiers

    def test_null_is_rejected_by_default(self):
        assert codes(number().validate(None)) == ["base.invalid"]

    def test_null_ok_and_empty_allow_null(self):
        assert number().null_ok().validate(None) is None
        assert number().empty().validate(None) is None

    def test_empty_string_message(self):
        result = string().validate("")
        assert result.message == "the value of value is not allowed to be empty"


# ============================================================================
# IMMUTABILITY AND PURITY
# ============================================================================


class TestImmutability:
    """Builder calls derive new schemas and leave their source untouched."""

    def test_rule_does_not_leak_into_source(self):
        source = number()
        derived = source.min(1)
        assert source.validate(0) is None
        assert codes(derived.validate(0)) == ["number.min"]

    def test_allow_does_not_leak_into_source(self):
        source = number()
        source.allow(None)
        assert codes(source.validate(None)) == ["base.invalid"]

    def test_siblings_do_not_share_sets(self):
        source = string()
        left = source.allow("x")
        right = source.deny("y")
        assert left.validate("y") is None
        assert codes(right.validate("y")) == ["base.invalid"]

    def test_repeated_validation_gives_equal_outcomes(self):
        schema = string().min(3)
        first = schema.validate("ab")
        second = schema.validate("ab")
        assert first.message == second.message
        assert first.types == second.types


# ============================================================================
# PEER RULES
# ============================================================================


class TestWith:
    """with_() needs every peer present and non-empty."""

    def test_passes_when_peers_present(self, field_options):
        options = field_options({"a": 1, "b": 2}, "a")
        assert number().with_("b").validate(1, options) is None

    def test_reports_first_missing_peer(self, field_options):
        options = field_options({"a": 1, "b": "", "c": 3}, "a")
        result = number().with_("c", "b").validate(1, options)
        assert codes(result) == ["base.with.peer"]
        assert result.violations[0].context["peer"] == "b"
        assert result.message == "a missing required peer b"

    def test_reports_missing_parent(self):
        assert codes(number().with_("b").validate(1)) == ["base.with.parent"]

    def test_rejects_bad_peer_names(self):
        with pytest.raises(SchemaDefinitionError):
            number().with_()
        with pytest.raises(SchemaDefinitionError):
            number().with_("")


class TestWithout:
    """without() fails only when every peer is present."""

    def test_fails_when_all_peers_present(self, field_options):
        options = field_options({"a": 1, "b": 2, "c": 3}, "a")
        result = number().without("b", "c").validate(1, options)
        assert codes(result) == ["base.without"]

    def test_passes_when_some_peer_missing(self, field_options):
        options = field_options({"a": 1, "b": 2}, "a")
        assert number().without("b", "c").validate(1, options) is None

    def test_required_field_delegates_to_xor(self):
        schema = number().required().without("b")
        assert [rule.name for rule in schema._rules][-1] == "xor"


class TestXor:
    """Exactly one of the field and its peers must be present."""

    def test_field_alone_passes(self, field_options):
        assert string().xor("b").validate("x", field_options({"a": "x"}, "a")) is None

    def test_peer_alone_passes(self, field_options):
        assert string().xor("b").validate(UNDEFINED, field_options({"b": "y"}, "a")) is None

    def test_empty_field_with_peer_passes(self, field_options):
        assert string().xor("b").validate("", field_options({"a": "", "b": "y"}, "a")) is None

    def test_both_present_fails(self, field_options):
        result = string().xor("b").validate("x", field_options({"a": "x", "b": "y"}, "a"))
        assert codes(result) == ["base.without"]

    def test_neither_present_fails(self, field_options):
        result = string().xor("b").validate(UNDEFINED, field_options({}, "a"))
        assert codes(result) == ["base.without"]


# ============================================================================
# RENAME
# ============================================================================


class TestRename:
    """rename() copies the field on the parent after successful validation."""

    def test_rename_with_delete(self, field_options):
        parent = {"a": 10}
        assert number().rename("b", delete_orig=True).validate(10, field_options(parent, "a")) is None
        assert parent == {"b": 10}

    def test_rename_keeps_source_by_default(self, field_options):
        parent = {"a": 10}
        number().rename("b").validate(10, field_options(parent, "a"))
        assert parent == {"a": 10, "b": 10}

    def test_refuses_overwrite(self, field_options):
        parent = {"a": 1, "b": 2}
        result = number().rename("b").validate(1, field_options(parent, "a"))
        assert codes(result) == ["base.rename.allowOverwrite"]
        assert parent == {"a": 1, "b": 2}

    def test_allow_overwrite(self, field_options):
        parent = {"a": 1, "b": 2}
        assert number().rename("b", allow_overwrite=True).validate(1, field_options(parent, "a")) is None
        assert parent["b"] == 1

    def test_refuses_second_rename_to_same_target(self):
        parent = {"a": 1, "b": 2}
        state = ValidationState(parent)
        assert number().rename("c").validate(1, {"key": "a", "state": state}) is None
        result = number().rename("c", allow_overwrite=True).validate(2, {"key": "b", "state": state})
        assert codes(result) == ["base.rename.allowMult"]

    def test_allow_mult(self):
        parent = {"a": 1, "b": 2}
        state = ValidationState(parent)
        number().rename("c").validate(1, {"key": "a", "state": state})
        result = number().rename("c", allow_mult=True, allow_overwrite=True).validate(2, {"key": "b", "state": state})
        assert result is None
        assert parent["c"] == 2

    def test_needs_parent(self):
        assert codes(number().rename("b").validate(1)) == ["base.rename.parent"]

    def test_not_applied_after_failed_check(self, field_options):
        parent = {"a": "abc"}
        result = number().rename("b").validate("abc", field_options(parent, "a"))
        assert codes(result) == ["number.base"]
        assert parent == {"a": "abc"}

    def test_still_applied_after_failed_check_without_early_abort(self, field_options):
        parent = {"a": "abc"}
        result = number().rename("b").validate("abc", field_options(parent, "a", early_abort=False))
        assert codes(result) == ["number.base"]
        assert parent == {"a": "abc", "b": "abc"}

    def test_rejects_bad_arguments(self):
        with pytest.raises(SchemaDefinitionError):
            number().rename("")
        with pytest.raises(SchemaDefinitionError):
            number().rename("b", delete_orig="yes")


# ============================================================================
# PIPELINE OPTIONS
# ============================================================================


class TestPipelineOptions:
    """early_abort, conversions and functions."""

    def test_early_abort_stops_at_first_violation(self):
        schema = string().min(5).regex(r"^[0-9]+$")
        assert codes(schema.validate("ab")) == ["string.min"]

    def test_collects_all_violations_without_early_abort(self):
        schema = string().min(5).regex(r"^[0-9]+$")
        result = schema.validate("ab", {"early_abort": False})
        assert codes(result) == ["string.min", "string.regex"]
        assert ". " in result.message

    def test_skip_conversions(self):
        assert number().validate("5") is None
        assert number().min(1).validate("5", {"skip_conversions": True}) is None
        assert codes(number().integer().validate("5.5", {"skip_conversions": True})) == ["number.integer"]

    def test_save_conversions_writes_back(self, field_options):
        parent = {"a": "5"}
        assert number().validate("5", field_options(parent, "a", save_conversions=True)) is None
        assert parent == {"a": 5}

    def test_conversions_not_saved_by_default(self, field_options):
        parent = {"a": "5"}
        number().validate("5", field_options(parent, "a"))
        assert parent == {"a": "5"}

    def test_skip_functions(self):
        assert codes(number().validate(len)) == ["number.base"]
        assert number().validate(len, {"skip_functions": True}) is None

    def test_key_appears_in_message_and_path(self):
        result = number().validate("abc", {"key": "age"})
        assert result.message == "the value of age must be a number"
        assert result.details[0]["path"] == "age"

    def test_deeply_nested_value_reports_a_violation(self):
        deep = []
        for _ in range(5000):
            deep = [deep]
        result = number().validate(deep)
        assert codes(result) == ["number.base"]
        assert result.message == "the value of value must be a number"

    def test_self_containing_value_reports_a_violation(self):
        loop = []
        loop.append(loop)
        assert codes(string().validate(loop)) == ["string.base"]


# ============================================================================
# METADATA AND DESCRIBE
# ============================================================================


class TestMetadata:
    """description/notes/tags setters and describe()."""

    def test_describe_reports_rules_and_sets(self):
        described = string().min(2).description("name").notes("short").tags(["api"]).describe()
        assert described["type"] == "string"
        assert [rule["name"] for rule in described["rules"]] == ["base", "min"]
        assert described["rules"][1]["args"]["limit"] == 2
        assert described["valids"] == [UNDEFINED]
        assert described["invalids"] == [None, ""]
        assert described["description"] == "name"
        assert described["notes"] == ["short"]
        assert described["tags"] == ["api"]

    def test_describe_lists_mutators(self):
        described = number().rename("b").describe()
        assert described["mutators"][0]["name"] == "rename"
        assert described["mutators"][0]["args"]["to"] == "b"

    def test_modifiers(self):
        assert number().required().null_ok().modifiers == frozenset({"required", "nullOk"})

    @pytest.mark.parametrize(
        "build",
        [
            lambda: number().description(5),
            lambda: number().notes(["ok", 3]),
            lambda: number().tags("single"),
            lambda: number().allow(),
        ],
    )
    def test_bad_metadata_raises_at_build_time(self, build):
        with pytest.raises(SchemaDefinitionError):
            build()
