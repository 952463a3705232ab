"""
Recurrence calculation.

Repeat rules travel as strings ("", "d <n>", "y") and are parsed once into
a RepeatRule. All dates are calendar dates formatted YYYYMMDD.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union

from errors import EmptyRepeatRule, InvalidDateFormat, InvalidRuleFormat

DATE_FORMAT = "%Y%m%d"
MAX_DAY_INTERVAL = 400

_DATE_RE = re.compile(r"[0-9]{8}")
_DAILY_RE = re.compile(r"d ([0-9]+)")


class RepeatKind(str, Enum):
    NONE = "none"
    DAILY = "daily"
    YEARLY = "yearly"


@dataclass(frozen=True)
class RepeatRule:
    kind: RepeatKind
    interval: int = 0

    def __bool__(self) -> bool:
        return self.kind is not RepeatKind.NONE

    def __str__(self) -> str:
        if self.kind is RepeatKind.DAILY:
            return f"d {self.interval}"
        if self.kind is RepeatKind.YEARLY:
            return "y"
        return ""


NO_REPEAT = RepeatRule(RepeatKind.NONE)


def parse_repeat(text: str) -> RepeatRule:
    """
    Parse a repeat rule string.
    "" -> no repeat, "d <n>" with 1 <= n <= 400 -> every n days, "y" -> yearly.
    """
    rule = (text or "").strip()
    if not rule:
        return NO_REPEAT
    if rule == "y":
        return RepeatRule(RepeatKind.YEARLY, 1)

    match = _DAILY_RE.fullmatch(rule)
    if match:
        interval = int(match.group(1))
        if 1 <= interval <= MAX_DAY_INTERVAL:
            return RepeatRule(RepeatKind.DAILY, interval)

    raise InvalidRuleFormat(text)


def parse_date(value: str) -> date:
    """Parse a YYYYMMDD string, rejecting anything that is not a real calendar date."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidDateFormat(value)
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateFormat(value) from None


def format_date(value: date) -> str:
    # strftime does not zero-pad years below 1000 on every platform
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def _add_year(value: date) -> date:
    # Feb 29 normalizes to Mar 1 in a non-leap year
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        return date(value.year + 1, 3, 1)


def next_date(now: date, anchor: str, repeat: Union[str, RepeatRule]) -> str:
    """
    Return the first occurrence of ``repeat`` counted from ``anchor`` that falls
    strictly after ``now``. At least one period is always added, so an anchor
    that is already in the future still moves forward.
    """
    rule = repeat if isinstance(repeat, RepeatRule) else parse_repeat(repeat)
    if not rule:
        raise EmptyRepeatRule("a task without a repeat rule has no next occurrence")

    current = parse_date(anchor)

    try:
        if rule.kind is RepeatKind.DAILY:
            elapsed = (now - current).days
            steps = max(1, elapsed // rule.interval + 1)
            return format_date(current + timedelta(days=steps * rule.interval))

        current = _add_year(current)
        while current <= now:
            current = _add_year(current)
        return format_date(current)
    except (ValueError, OverflowError):
        # next occurrence falls past year 9999
        raise InvalidDateFormat(anchor) from None
