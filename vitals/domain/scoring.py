"""
Rule-based scoring of individual vital signs.

Each scorer is a pure, total function: it never raises and always returns a
``FieldScore``. Values that fail type or parse validation are ``Unscorable``,
never a guessed number. ``Unscorable`` contributes 0 to a risk total through
``effective``, which keeps the substitution an explicit step.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Final

# Longest leading decimal literal, the way a permissive float parser reads it
_LEADING_NUMBER = re.compile(
    r"\s*([+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))"
)


@dataclass(frozen=True)
class Scored:
    """A successfully classified field."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 3:
            raise ValueError(f"field score must be within 0..3, got {self.value}")

    @property
    def effective(self) -> int:
        return self.value

    @property
    def is_scorable(self) -> bool:
        return True


@dataclass(frozen=True)
class Unscorable:
    """A field the rule table could not classify."""

    reason: str = "unscorable"

    @property
    def effective(self) -> int:
        return 0

    @property
    def is_scorable(self) -> bool:
        return False


FieldScore = Scored | Unscorable

MISSING: Final = Unscorable("missing")
WRONG_TYPE: Final = Unscorable("wrong_type")
NOT_NUMERIC: Final = Unscorable("not_numeric")
NO_MATCHING_RULE: Final = Unscorable("no_matching_rule")


def parse_leading_number(text: str) -> float | None:
    """
    Parse the leading numeric content of ``text``.

    Leading whitespace is skipped and trailing garbage ignored, so ``"72 "``
    and ``"98.6F"`` parse while ``"abc"`` does not. NaN never comes back.
    """
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    number = float(match.group(1).replace("Infinity", "inf"))
    return None if math.isnan(number) else number


def _coerce_number(value: Any, allow_zero: bool) -> float | Unscorable:
    """Turn a number or numeric string into a float, or say why it can't be scored."""
    if value is None:
        return MISSING
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return WRONG_TYPE
    if isinstance(value, str):
        if not value:
            return MISSING
        parsed = parse_leading_number(value)
        if parsed is None:
            return NOT_NUMERIC
        number = parsed
    else:
        try:
            number = float(value)
        except OverflowError:
            number = math.inf if value > 0 else -math.inf
        if math.isnan(number):
            return NOT_NUMERIC
        # a bare numeric zero is an absent reading unless zero is meaningful
        if number == 0 and not allow_zero:
            return MISSING
    return number


def score_blood_pressure(value: Any) -> FieldScore:
    """
    Score a ``"systolic/diastolic"`` reading.

    Rules are checked in order and the first match wins. Bands are inclusive
    whole-number bounds (120..129, 130..139, 80..89), so the ranges are not
    exhaustive: readings such as ``129.5/70`` match nothing and are unscorable.
    """
    if value is None or value == "":
        return MISSING
    if not isinstance(value, str):
        return WRONG_TYPE

    parts = value.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return NOT_NUMERIC

    systolic = parse_leading_number(parts[0])
    diastolic = parse_leading_number(parts[1])
    if systolic is None or diastolic is None:
        return NOT_NUMERIC

    if systolic < 120 and diastolic < 80:
        return Scored(0)
    if 120 <= systolic <= 129 and diastolic < 80:
        return Scored(1)
    if 130 <= systolic <= 139 or 80 <= diastolic <= 89:
        return Scored(2)
    if systolic >= 140 or diastolic >= 90:
        return Scored(3)
    return NO_MATCHING_RULE


def score_temperature(value: Any) -> FieldScore:
    """Score a body temperature in Fahrenheit. Readings in (100.9, 101) are unscorable."""
    number = _coerce_number(value, allow_zero=False)
    if isinstance(number, Unscorable):
        return number

    if number <= 99.5:
        return Scored(0)
    if 99.5 < number <= 100.9:
        return Scored(1)
    if number >= 101:
        return Scored(2)
    return NO_MATCHING_RULE


def score_age(value: Any) -> FieldScore:
    """Score an age in years. Zero is a valid age."""
    number = _coerce_number(value, allow_zero=True)
    if isinstance(number, Unscorable):
        return number

    if number < 40:
        return Scored(0)
    if 40 <= number <= 65:
        return Scored(1)
    if number > 65:
        return Scored(2)
    return NO_MATCHING_RULE
