from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Tuple


TRUE_WORDS = {"true", "yes"}
FALSE_WORDS = {"false", "no"}


@dataclass(frozen=True)
class Coerced:
    """Outcome of a representation coercion.

    ``ok`` is False when the input had no usable representation; ``value`` then
    holds the untouched input.
    """

    value: Any
    ok: bool = True


def _unchanged(value: Any) -> Coerced:
    return Coerced(value, ok=False)


def _dispatch(value: Any, table: Tuple[Tuple[Any, Callable[[Any], Coerced]], ...]) -> Coerced:
    for kinds, coercer in table:
        if isinstance(value, kinds):
            return coercer(value)
    return _unchanged(value)


# ---- numbers ----------------------------------------------------------------


def parse_number(text: str) -> Coerced:
    """Parse a numeric string into an int (when integral) or a float."""
    stripped = text.strip()
    if not stripped:
        return _unchanged(text)
    try:
        dec = Decimal(stripped)
    except InvalidOperation:
        return _unchanged(text)

    # NaN and infinities only come from real floats, never from text
    if not dec.is_finite():
        return _unchanged(text)
    if dec == dec.to_integral_value():
        return Coerced(int(dec))
    return Coerced(float(dec))


def is_numeric_string(value: Any) -> bool:
    return isinstance(value, str) and parse_number(value).ok


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: Any) -> Coerced:
    if is_number(value):
        return Coerced(value)
    if isinstance(value, str):
        return parse_number(value)
    return _unchanged(value)


# ---- booleans ---------------------------------------------------------------


def _boolean_from_text(text: str) -> Coerced:
    lowered = text.lower()
    if lowered in TRUE_WORDS:
        return Coerced(True)
    if lowered in FALSE_WORDS:
        return Coerced(False)
    return _unchanged(text)


def coerce_boolean(value: Any) -> Coerced:
    return _dispatch(value, ((bool, Coerced), (str, _boolean_from_text)))


# ---- arrays -----------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _array_from_text(text: str) -> Coerced:
    # Numeric strings are left for the base check to reject
    if is_numeric_string(text):
        return _unchanged(text)
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return _unchanged(text)
    if isinstance(parsed, list):
        return Coerced(parsed)
    return Coerced([parsed])


def coerce_array(value: Any) -> Coerced:
    return _dispatch(value, ((list, Coerced), (str, _array_from_text)))


# ---- dates ------------------------------------------------------------------


def as_utc(moment: datetime) -> datetime:
    """Return an aware datetime; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _date_from_datetime(value: datetime) -> Coerced:
    return Coerced(value)


def _date_from_day(value: date) -> Coerced:
    return Coerced(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))


def _date_from_epoch_ms(value: Any) -> Coerced:
    try:
        return Coerced(datetime.fromtimestamp(value / 1000.0, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        return _unchanged(value)


def _date_from_text(text: str) -> Coerced:
    number = parse_number(text)
    if number.ok:
        return _date_from_epoch_ms(number.value)

    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        return Coerced(datetime.fromisoformat(candidate))
    except ValueError:
        return _unchanged(text)


def _reject(value: Any) -> Coerced:
    return _unchanged(value)


_DATE_COERCIONS: Tuple[Tuple[Any, Callable[[Any], Coerced]], ...] = (
    (datetime, _date_from_datetime),
    (date, _date_from_day),
    (bool, _reject),
    ((int, float), _date_from_epoch_ms),
    (str, _date_from_text),
)


def coerce_date(value: Any) -> Coerced:
    """Coerce datetimes, dates, epoch milliseconds and date strings to a datetime."""
    return _dispatch(value, _DATE_COERCIONS)
