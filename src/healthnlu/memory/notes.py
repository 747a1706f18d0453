"""Semicolon-delimited ``key=value`` Notes tokens stored alongside each entry."""

from __future__ import annotations

from typing import Any

from healthnlu.models.result import ParseResult

NOTES_VERSION = "2.1"

# (notes key, slot name) in output order.
_VALUE_KEYS: tuple[tuple[str, str], ...] = (
    ("meal", "meal_time"),
    ("time", "time"),
    ("time_approx", "time_approx"),
    ("bristol", "bristol"),
    ("bristol_note", "bristol_note"),
    ("sides", "sides"),
    ("portion", "portion"),
    ("portion_g", "portion_g"),
    ("portion_ml", "portion_ml"),
    ("portion_multiplier", "portion_multiplier"),
    ("brand_variant", "brand_variant"),
    ("brand", "brand"),
    ("severity", "severity"),
    ("severity_note", "severity_note"),
    ("symptom_type", "symptom_type"),
    ("mood", "mood"),
)
_FLAG_KEYS: tuple[str, ...] = ("caffeine", "decaf", "dairy", "non_dairy")


def _clean(value: Any) -> str:
    return " ".join(str(value).replace(";", ",").replace("=", ":").split())


def build_notes(result: ParseResult) -> str:
    slots = result.slots
    tokens = [f"notes_v={NOTES_VERSION}"]
    for key, slot in _VALUE_KEYS:
        value = slots.get(slot)
        if value is not None and value != "":
            tokens.append(f"{key}={_clean(value)}")
    for flag in _FLAG_KEYS:
        if slots.get(flag):
            tokens.append(f"{flag}=true")
    tokens.append(f"confidence={'llm' if result.meta.llm_used else 'rules'}")
    if slots.get("meal_time_note"):
        tokens.append(f"meal_time_note={_clean(slots['meal_time_note'])}")
    return "; ".join(tokens)


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def parse_notes(text: str) -> dict[str, Any]:
    """Parse a Notes string; a bare token without ``=`` reads as a true flag."""
    parsed: dict[str, Any] = {}
    for token in (text or "").split(";"):
        token = token.strip()
        if not token:
            continue
        key, sep, value = token.partition("=")
        key = key.strip()
        if not sep:
            parsed[key] = True
            continue
        parsed[key] = _coerce(value.strip())
    return parsed
