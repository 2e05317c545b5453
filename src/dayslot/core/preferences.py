"""Free-text time-of-day preference parsing - no I/O dependencies."""

import re
from dataclasses import dataclass

WORK_DAY_START = 8 * 60

_CLOCK = r"(\d{1,2})(?::(\d{2}))?\s*(am|pm)?"
# A clock must not run on into more digits ("2.30pm", "2:5pm").
_CLOCK_END = r"(?!\w|[.:]\d)"

_AT_PATTERN = re.compile(rf"\bat\s+{_CLOCK}{_CLOCK_END}", re.IGNORECASE)
_STANDALONE_PATTERN = re.compile(rf"^\s*{_CLOCK}\s*$", re.IGNORECASE)
_BEFORE_PATTERN = re.compile(rf"\bbefore\s+{_CLOCK}{_CLOCK_END}", re.IGNORECASE)
_AFTER_PATTERN = re.compile(rf"\bafter\s+{_CLOCK}{_CLOCK_END}", re.IGNORECASE)

# Checked in order; "after lunch" must win over "afternoon", which must win over "noon".
_NAMED_RANGES: list[tuple[tuple[str, ...], int]] = [
    (("morning", "first thing"), 8 * 60),
    (("after lunch",), 13 * 60),
    (("afternoon",), 14 * 60),
    (("evening",), 17 * 60),
    (("noon", "midday"), 12 * 60),
]


@dataclass(frozen=True)
class ParsedPreference:
    """A canonical time constraint.

    Exact preferences pin a task to one clock time; non-exact ones are a
    lower bound for the slot search.
    """

    anchor_minute: int
    exact: bool


def clock_to_minutes(hour: str, minute: str | None, meridiem: str | None) -> int | None:
    """Convert regex clock groups to minute-of-day, or None if out of range."""
    h = int(hour)
    m = int(minute) if minute else 0
    if m > 59:
        return None

    if meridiem:
        meridiem = meridiem.lower()
        if h < 1 or h > 12:
            return None
        if meridiem == "pm" and h < 12:
            h += 12
        elif meridiem == "am" and h == 12:
            h = 0
    elif h > 23:
        return None

    return h * 60 + m


def _from_match(match: re.Match, exact: bool) -> ParsedPreference | None:
    minutes = clock_to_minutes(*match.groups())
    if minutes is None:
        return None
    return ParsedPreference(anchor_minute=minutes, exact=exact)


def parse_time_preference(text: str | None) -> ParsedPreference | None:
    """
    Parse a free-text preference like "at 2pm", "after 15:30" or "morning".

    Pure function - never raises. Unrecognized or ambiguous text means
    no preference.
    """
    if not text or not isinstance(text, str):
        return None

    pref = text.strip().lower()

    match = _AT_PATTERN.search(pref)
    if match:
        return _from_match(match, exact=True)

    match = _STANDALONE_PATTERN.match(pref)
    if match:
        return _from_match(match, exact=True)

    match = _BEFORE_PATTERN.search(pref)
    if match:
        # The stated hour is not a deadline; only the search start moves.
        if clock_to_minutes(*match.groups()) is None:
            return None
        return ParsedPreference(anchor_minute=WORK_DAY_START, exact=False)

    match = _AFTER_PATTERN.search(pref)
    if match:
        return _from_match(match, exact=False)

    for phrases, minute in _NAMED_RANGES:
        if any(phrase in pref for phrase in phrases):
            return ParsedPreference(anchor_minute=minute, exact=False)

    return None


class TimePreferenceParser:
    """
    Object wrapper around parse_time_preference with a memo.

    Meant to live for one scheduling run, so the memo never outgrows the
    task list it was built for.
    """

    def __init__(self):
        self._cache: dict[str, ParsedPreference | None] = {}

    def parse(self, text: str | None) -> ParsedPreference | None:
        if not text or not isinstance(text, str):
            return None
        if text not in self._cache:
            self._cache[text] = parse_time_preference(text)
        return self._cache[text]
