"""Tests for validation options and their JSON Schema check."""

import pytest

from schemachain import ValidationOptions, ValidationState, number
from schemachain.exceptions import OptionsError
from schemachain.models.options import check_options, resolve_options


class TestCheckOptions:
    """Rejected option shapes."""

    def test_valid_options_have_no_issues(self):
        assert check_options({"early_abort": False, "key": "a", "state": ValidationState({})}) == []

    @pytest.mark.parametrize(
        "options",
        [
            {"early_abrt": True},
            {"early_abort": "yes"},
            {"key": 5},
            {"language_path": ""},
            {"state": "parent"},
        ],
    )
    def test_bad_options_are_reported(self, options):
        assert check_options(options)

    def test_validate_raises_on_bad_options(self):
        with pytest.raises(OptionsError, match="early_abrt"):
            number().validate(1, {"early_abrt": True})

    def test_non_mapping_options(self):
        with pytest.raises(OptionsError):
            number().validate(1, 42)


class TestValidationOptions:
    """Defaults, paths and resolution."""

    def test_defaults(self):
        options = resolve_options(None)
        assert options.early_abort is True
        assert options.skip_conversions is False
        assert options.save_conversions is False
        assert options.strip_extra_keys is False
        assert options.allow_extra_keys is False
        assert options.language_path.endswith("en.yaml")
        assert not options.state.has_parent

    def test_instance_passes_through(self):
        options = ValidationOptions(key="a")
        assert resolve_options(options) is options

    def test_mapping_merges_over_defaults(self):
        options = resolve_options({"early_abort": False})
        assert options.early_abort is False
        assert options.skip_functions is False

    def test_path_prefers_key_path(self):
        assert ValidationOptions(key="b", key_path="a.b").path == "a.b"
        assert ValidationOptions(key="b").path == "b"
        assert ValidationOptions().path == ""

    def test_for_item(self):
        item = ValidationOptions(key="items", state=ValidationState({"items": []})).for_item(2)
        assert item.key == "2"
        assert item.path == "items.2"
        assert not item.state.has_parent
