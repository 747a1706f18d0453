"""Unit conversion tables, fractions, named sizes and category densities."""

from __future__ import annotations

from types import MappingProxyType

# Reference quantities the portion multiplier is expressed against.
CUP_ML = 236.0
SERVING_G = 100.0

VOLUME_ML = MappingProxyType({
    "ml": 1.0, "milliliter": 1.0, "milliliters": 1.0,
    "l": 1000.0, "liter": 1000.0, "liters": 1000.0,
    "cup": 236.588, "cups": 236.588, "c": 236.588,
    "fl oz": 29.5735, "floz": 29.5735, "fluid ounce": 29.5735, "fluid ounces": 29.5735,
    "oz": 29.5735,
    "tbsp": 14.7868, "tablespoon": 14.7868, "tablespoons": 14.7868,
    "tsp": 4.92892, "teaspoon": 4.92892, "teaspoons": 4.92892,
    "pint": 473.176, "pints": 473.176,
    "quart": 946.353, "quarts": 946.353,
    "gallon": 3785.41, "gallons": 3785.41,
})

MASS_G = MappingProxyType({
    "g": 1.0, "gram": 1.0, "grams": 1.0,
    "kg": 1000.0, "kilogram": 1000.0, "kilograms": 1000.0,
    "oz": 28.3495, "ounce": 28.3495, "ounces": 28.3495,
    "lb": 453.592, "lbs": 453.592, "pound": 453.592, "pounds": 453.592,
})

# Count units with a known average weight.
COUNT_G = MappingProxyType({
    "slice": 28.0, "slices": 28.0,
    "piece": 30.0, "pieces": 30.0,
    "bowl": 150.0, "bowls": 150.0,
    "serving": 100.0, "servings": 100.0,
    "portion": 100.0, "portions": 100.0,
    "handful": 30.0, "handfuls": 30.0,
    "scoop": 50.0, "scoops": 50.0,
    "egg": 50.0, "eggs": 50.0,
})

# Count units without a weight; only the multiplier is known.
COUNT_ONLY: frozenset[str] = frozenset({
    "bite", "bites", "muffin", "muffins", "can", "cans", "bottle", "bottles",
    "bar", "bars",
})

UNICODE_FRACTIONS = MappingProxyType({
    "¼": 0.25, "½": 0.5, "¾": 0.75,
    "⅓": 0.33, "⅔": 0.67,
    "⅛": 0.125, "⅜": 0.375, "⅝": 0.625, "⅞": 0.875,
    "⅕": 0.2, "⅖": 0.4, "⅗": 0.6, "⅘": 0.8,
})

# Café sizes recognised for any item.
CAFE_SIZES = MappingProxyType({
    "short": 236, "tall": 355, "grande": 473, "venti": 591, "trenta": 887,
})
# Generic sizes only count as a portion for drinks.
GENERIC_DRINK_SIZES = MappingProxyType({
    "extra large": 887, "small": 355, "medium": 473, "large": 591,
})
BOWL_SIZES = MappingProxyType({
    "small bowl": 240, "medium bowl": 355, "large bowl": 475,
})

# Grams per cup (or per serving for proteins).
DENSITY_MAP = MappingProxyType({
    "cereal": 30, "granola": 50, "oats": 80, "oatmeal": 80, "muesli": 85,
    "rice": 158, "brown rice": 195, "white rice": 158, "jasmine rice": 158,
    "basmati rice": 158, "quinoa": 185, "farro": 180, "pasta": 140,
    "yogurt": 245, "milk": 244, "oat milk": 240, "almond milk": 240,
    "chicken": 120, "salmon": 140, "tofu": 126,
})
VOLUME_LIKE_UNITS: frozenset[str] = frozenset({"cup", "cups", "c", "bowl", "bowls"})

ALL_UNITS: frozenset[str] = frozenset(
    set(VOLUME_ML) | set(MASS_G) | set(COUNT_G) | COUNT_ONLY
)
