"""Time-of-day and meal-window normalization."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from healthnlu.models.signals import TimeInfo
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Los_Angeles"

# (start_hour, end_hour); "late" wraps past midnight.
MEAL_WINDOWS: dict[str, tuple[int, int]] = {
    "breakfast": (5, 11),
    "lunch": (11, 15),
    "snack": (15, 17),
    "dinner": (17, 22),
    "late": (22, 2),
}

RELATIVE_PHRASES: tuple[tuple[str, str, str | None], ...] = (
    ("this morning", "morning", "breakfast"),
    ("earlier", "earlier", None),
    ("tonight", "night", "dinner"),
    ("this evening", "evening", "dinner"),
    ("this afternoon", "afternoon", "lunch"),
    ("at night", "night", "late"),
    ("late night", "late", "late"),
    ("at lunch", "midday", "lunch"),
)

_CLOCK_12_RE = re.compile(
    r"(?<![\w:])(?:at\s+|@\s*)?(\d{1,2})(?::([0-5]\d))?\s*([ap])\.?\s?m\b\.?", re.I
)
_CLOCK_24_RE = re.compile(r"(?<![\w:])(?:at\s+|@\s*)?([01]?\d|2[0-3]):([0-5]\d)(?![\w:])")
_NOON_RE = re.compile(r"\b(?:at\s+)?(noon|midnight)\b", re.I)


def resolve_zone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("unknown timezone %r, using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def local_now(tz: str | None, now: datetime | None = None) -> datetime:
    zone = resolve_zone(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt_timezone.utc)
    return now.astimezone(zone)


def meal_window_for(hour: int) -> str:
    for meal, (start, end) in MEAL_WINDOWS.items():
        if start < end:
            if start <= hour < end:
                return meal
        elif hour >= start or hour < end:
            return meal
    # 02:00-05:00 belongs to no window.
    return "snack"


def _absolute(text: str, local: datetime) -> TimeInfo | None:
    hour = minute = None
    m = _CLOCK_12_RE.search(text)
    if m:
        hour = int(m.group(1))
        minute = int(m.group(2) or 0)
        if not 1 <= hour <= 12:
            hour = None
        else:
            pm = m.group(3).lower() == "p"
            hour = hour % 12 + (12 if pm else 0)
    if hour is None:
        m = _CLOCK_24_RE.search(text)
        if m:
            hour, minute = int(m.group(1)), int(m.group(2))
    if hour is None:
        m = _NOON_RE.search(text)
        if m:
            hour, minute = (12, 0) if m.group(1).lower() == "noon" else (0, 0)
    if hour is None or minute is None:
        return None
    stamp = local.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return TimeInfo(
        time=stamp.strftime("%H:%M:%S"),
        timestamp=stamp.isoformat(),
        meal_time=meal_window_for(hour),
        source="absolute",
    )


def _relative(text: str) -> TimeInfo | None:
    for phrase, approx, meal in RELATIVE_PHRASES:
        if lookup.contains_term(text, phrase):
            return TimeInfo(approx=approx, meal_time=meal, source="relative")
    return None


def _meal_keyword(text: str) -> TimeInfo | None:
    for meal, words in lx.MEAL_KEYWORDS.items():
        if lookup.first_term(text, words):
            return TimeInfo(meal_time=meal, source="keyword")
    return None


def infer_meal_window(timezone: str | None = None, now: datetime | None = None) -> TimeInfo:
    local = local_now(timezone, now)
    return TimeInfo(meal_time=meal_window_for(local.hour), source="inferred", inferred=True)


def parse_time_info(
    text: str,
    timezone: str | None = DEFAULT_TIMEZONE,
    now: datetime | None = None,
    infer: bool = True,
) -> TimeInfo:
    """Absolute clock time, then relative dayparts, then meal words, then inference.

    With ``infer=False`` nothing is guessed and an empty ``TimeInfo`` comes back
    when the text states no time.
    """
    local = local_now(timezone, now)
    lowered = text.lower()
    for parse in (lambda t: _absolute(t, local), _relative, _meal_keyword):
        info = parse(lowered)
        if info is not None:
            return info
    if not infer:
        return TimeInfo()
    return infer_meal_window(timezone, now)
