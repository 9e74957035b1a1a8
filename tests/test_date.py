"""Tests for the date schema and date coercion."""

from datetime import date as day, datetime, timedelta, timezone

import pytest

from schemachain import date
from schemachain.exceptions import SchemaDefinitionError
from schemachain.utils.coercion import coerce_date
from tests.helpers import codes

NEW_YEAR_2020_MS = 1577836800000


class TestDateCoercion:
    """Tagged coercion of the supported representations."""

    def test_datetime_kept(self):
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert coerce_date(moment).value is moment

    def test_date_promoted_to_utc_midnight(self):
        assert coerce_date(day(2020, 1, 1)).value == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        assert coerce_date(NEW_YEAR_2020_MS).value == datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert coerce_date(str(NEW_YEAR_2020_MS)).value == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_iso_strings(self):
        coerced = coerce_date("2020-01-01T10:00:00Z")
        assert coerced.ok
        assert coerced.value == datetime(2020, 1, 1, 10, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["garbage", True, None, [2020]])
    def test_unusable_values_left_unchanged(self, value):
        coerced = coerce_date(value)
        assert not coerced.ok
        assert coerced.value is value


class TestDateSchema:
    """Base check and bounds."""

    @pytest.mark.parametrize("value", [datetime(2020, 1, 1), day(2020, 1, 1), NEW_YEAR_2020_MS, "2020-01-01"])
    def test_accepts_dates(self, value):
        assert date().validate(value) is None

    def test_rejects_garbage(self):
        result = date().validate("garbage")
        assert codes(result) == ["date.base"]
        assert result.message == "the value of value must be a number of milliseconds or valid date string"

    def test_strings_rejected_without_conversion(self):
        assert codes(date().validate("2020-01-01", {"skip_conversions": True})) == ["date.base"]

    def test_min(self):
        schema = date().min("2020-01-01")
        assert schema.validate(datetime(2020, 1, 1)) is None
        assert schema.validate(NEW_YEAR_2020_MS) is None
        result = schema.validate("2019-06-01")
        assert codes(result) == ["date.min"]
        assert result.violations[0].context["limit"] == "2020-01-01T00:00:00+00:00"

    def test_max(self):
        schema = date().max(datetime(2020, 1, 1, tzinfo=timezone.utc))
        assert schema.validate("2019-12-31") is None
        assert codes(schema.validate(datetime(2020, 1, 2))) == ["date.max"]

    def test_offsets_are_compared_in_utc(self):
        plus_two = timezone(timedelta(hours=2))
        schema = date().min(datetime(2020, 1, 1, 0, 0, tzinfo=timezone.utc))
        assert codes(schema.validate(datetime(2020, 1, 1, 1, 0, tzinfo=plus_two))) == ["date.min"]

    def test_bad_bound_raises_at_build_time(self):
        with pytest.raises(SchemaDefinitionError):
            date().min("not a date")
        with pytest.raises(SchemaDefinitionError):
            date().max(True)


class TestDateStrictBoundsAndIso:
    """greater/less and the ISO-only format."""

    def test_greater(self):
        schema = date().greater("2020-01-01T00:00:00+00:00")
        assert schema.validate(datetime(2020, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) is None
        result = schema.validate(NEW_YEAR_2020_MS, {"key": "start"})
        assert codes(result) == ["date.greater"]
        assert result.message == "the value of start must be greater than 2020-01-01T00:00:00+00:00"

    def test_less(self):
        schema = date().less(day(2020, 1, 1))
        assert schema.validate(datetime(2019, 12, 31, 23, 59)) is None
        assert codes(schema.validate(datetime(2020, 1, 1))) == ["date.less"]

    def test_iso_accepts_iso_strings_and_dates(self):
        schema = date().iso()
        assert schema.validate("2020-01-01T10:00:00+00:00") is None
        assert schema.validate(datetime(2020, 1, 1)) is None
        assert schema.validate(day(2020, 1, 1)) is None

    @pytest.mark.parametrize("value", [NEW_YEAR_2020_MS, str(NEW_YEAR_2020_MS), "garbage"])
    def test_iso_rejects_timestamps_and_garbage(self, value):
        result = date().iso().validate(value)
        assert codes(result) == ["date.isoDate"]
        assert result.message == "the value of value must be a valid ISO 8601 date"

    def test_iso_keeps_existing_rules(self):
        schema = date().min("2020-01-01T00:00:00+00:00").iso()
        assert codes(schema.validate("2019-06-01T00:00:00+00:00")) == ["date.min"]
        assert [rule.name for rule in schema._rules] == ["base", "min"]

    def test_iso_does_not_change_source(self):
        source = date()
        source.iso()
        assert source.validate(NEW_YEAR_2020_MS) is None
