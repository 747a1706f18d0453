"""Quantity and unit parsing into grams, millilitres and a scaling multiplier."""

from __future__ import annotations

import functools
import re

from healthnlu.models.signals import CategoryEstimate, PortionInfo
from healthnlu.ontology import lookup
from healthnlu.ontology import units

_QTY = r"(\d+\s*/\s*\d+|\d+(?:\.\d+)?|[" + "".join(units.UNICODE_FRACTIONS) + r"])"
_BARE_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*x?\s*$", re.I)

ASCII_FRACTIONS = {
    "1/4": 0.25, "1/2": 0.5, "3/4": 0.75, "1/3": 0.33, "2/3": 0.67,
    "1/8": 0.125, "3/8": 0.375, "5/8": 0.625, "7/8": 0.875,
}


def parse_fraction(value: str) -> float:
    """Decimal value of an integer, decimal, Unicode fraction or ``n/d`` string."""
    value = value.strip()
    if value in units.UNICODE_FRACTIONS:
        return units.UNICODE_FRACTIONS[value]
    compact = re.sub(r"\s+", "", value)
    if compact in ASCII_FRACTIONS:
        return ASCII_FRACTIONS[compact]
    if "/" in compact:
        num, _, denom = compact.partition("/")
        try:
            n, d = float(num), float(denom)
        except ValueError:
            return 1.0
        return n / d if d else 1.0
    try:
        return float(compact)
    except ValueError:
        return 1.0


def _alternation(names) -> str:
    ordered = sorted(names, key=len, reverse=True)
    return "|".join(re.escape(n).replace(r"\ ", r"\s*") for n in ordered)


@functools.lru_cache(maxsize=4)
def _unit_pattern(kind: str, item_type: str) -> re.Pattern[str]:
    if kind == "volume":
        names = [u for u in units.VOLUME_ML if not (u == "oz" and item_type != "drink")]
    else:
        names = list(units.MASS_G) + list(units.COUNT_G) + list(units.COUNT_ONLY)
        if item_type == "drink":
            names = [u for u in names if u != "oz"]
    return re.compile(rf"(?<![\w.]){_QTY}\s*({_alternation(names)})(?![\w])", re.I)


def _normalize_unit(unit: str) -> str:
    return re.sub(r"\s+", " ", unit.lower().strip())


def _lookup_unit(unit: str, table) -> float | None:
    if unit in table:
        return table[unit]
    squashed = unit.replace(" ", "")
    for key, factor in table.items():
        k = key.replace(" ", "")
        if k == squashed or k == squashed + "s" or k + "s" == squashed:
            return factor
    return None


def _named_size(text: str, item_type: str) -> PortionInfo | None:
    tables = [units.CAFE_SIZES, units.BOWL_SIZES]
    if item_type == "drink":
        tables.append(units.GENERIC_DRINK_SIZES)
    hits = [
        (name, ml)
        for table in tables
        for name, ml in table.items()
        if lookup.contains_term(text, name)
    ]
    if not hits:
        return None
    name, ml = max(hits, key=lambda h: len(h[0]))
    return PortionInfo(
        raw=name,
        normalized_ml=ml,
        multiplier=round(ml / units.CUP_ML, 3),
        unit=name,
        quantity=1.0,
    )


def parse_portion(text: str, item_type: str = "food") -> PortionInfo:
    """Parse the first portion expression in ``text``.

    Recognised in priority order: named café or bowl sizes, volume quantities,
    mass and count quantities, then a bare number read as a serving multiplier.
    ``oz`` is volume for drinks and mass otherwise. The multiplier is relative
    to one cup (236 ml) or one 100 g serving.
    """
    t = text.lower().strip()
    if not t:
        return PortionInfo()

    named = _named_size(t, item_type)
    if named is not None:
        return named

    m = _unit_pattern("volume", item_type).search(t)
    if m:
        qty = parse_fraction(m.group(1))
        unit = _normalize_unit(m.group(2))
        ml_per = _lookup_unit(unit, units.VOLUME_ML)
        if ml_per:
            total = qty * ml_per
            return PortionInfo(
                raw=f"{m.group(1)} {unit}",
                normalized_ml=round(total),
                multiplier=round(total / units.CUP_ML, 3),
                unit=unit,
                quantity=qty,
            )

    m = _unit_pattern("mass", item_type).search(t)
    if m:
        qty = parse_fraction(m.group(1))
        unit = _normalize_unit(m.group(2))
        raw = f"{m.group(1)} {unit}"
        g_per = _lookup_unit(unit, units.MASS_G) or _lookup_unit(unit, units.COUNT_G)
        if g_per:
            total = qty * g_per
            return PortionInfo(
                raw=raw,
                normalized_g=round(total),
                multiplier=round(total / units.SERVING_G, 3),
                unit=unit,
                quantity=qty,
            )
        return PortionInfo(raw=raw, multiplier=qty, unit=unit, quantity=qty)

    m = _BARE_NUMBER_RE.match(t)
    if m:
        qty = float(m.group(1))
        return PortionInfo(raw=m.group(1), multiplier=qty, quantity=qty)

    return PortionInfo()


def extract_portion(text: str, item_type: str = "food") -> PortionInfo | None:
    portion = parse_portion(text, item_type)
    return portion if portion.raw else None


def infer_by_category(item: str, unit: str, qty: float = 1.0) -> CategoryEstimate | None:
    """Estimate grams from the density map for cup/bowl portions of a known category.

    Returns None for unknown items and for units that are not volume-like, so
    no mass is ever made up for an incompatible unit and category pair.
    """
    if not item or not unit or unit.lower() not in units.VOLUME_LIKE_UNITS:
        return None
    category = lookup.longest_term(item, units.DENSITY_MAP)
    if category is None:
        return None
    return CategoryEstimate(portion_g=round(units.DENSITY_MAP[category] * qty), category=category)
