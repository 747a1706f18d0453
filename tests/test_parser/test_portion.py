"""Brutal tests for portion parsing and category inference."""

from __future__ import annotations

import pytest

from healthnlu.parser.portion import (
    extract_portion,
    infer_by_category,
    parse_fraction,
    parse_portion,
)


class TestParseFraction:
    @pytest.mark.parametrize(
        "value,expected",
        [("½", 0.5), ("1/2", 0.5), ("3 / 4", 0.75), ("2", 2.0), ("1.5", 1.5), ("5/3", 5 / 3)],
    )
    def test_values(self, value, expected):
        assert parse_fraction(value) == pytest.approx(expected)

    def test_zero_denominator(self):
        assert parse_fraction("1/0") == 1.0

    def test_garbage(self):
        assert parse_fraction("lots") == 1.0


class TestParsePortion:
    def test_oz_is_volume_for_drinks(self):
        p = parse_portion("16oz", "drink")
        assert p.normalized_ml == 473
        assert p.normalized_g is None
        assert p.multiplier == pytest.approx(2.005)

    def test_oz_is_mass_for_food(self):
        p = parse_portion("16oz", "food")
        assert p.normalized_g == 454
        assert p.normalized_ml is None
        assert p.multiplier == pytest.approx(4.536)

    def test_unicode_fraction_cup(self):
        p = parse_portion("½ cup")
        assert p.normalized_ml == 118
        assert p.quantity == 0.5
        assert p.unit == "cup"

    def test_count_with_weight(self):
        p = parse_portion("2 slices")
        assert p.normalized_g == 56
        assert p.multiplier == pytest.approx(0.56)

    def test_count_without_weight(self):
        p = parse_portion("3 bites")
        assert p.raw == "3 bites"
        assert p.normalized_g is None
        assert p.multiplier == 3.0

    def test_cafe_size(self):
        p = parse_portion("grande", "drink")
        assert p.normalized_ml == 473
        assert p.raw == "grande"

    def test_generic_size_only_for_drinks(self):
        assert parse_portion("large", "drink").normalized_ml == 591
        assert parse_portion("large", "food").raw is None

    def test_bowl_size(self):
        assert parse_portion("a large bowl of oats").normalized_ml == 475

    def test_bare_number_is_multiplier(self):
        p = parse_portion("2")
        assert p.multiplier == 2.0
        assert p.normalized_g is None

    def test_grams(self):
        assert parse_portion("had 250g rice").normalized_g == 250

    def test_empty(self):
        p = parse_portion("   ")
        assert p.raw is None
        assert p.multiplier == 1.0

    def test_extract_portion_none_without_match(self):
        assert extract_portion("chicken salad") is None
        assert extract_portion("2 cups of tea", "drink").normalized_ml == 473


class TestInferByCategory:
    def test_cup_of_rice(self):
        est = infer_by_category("brown rice", "cup", 1.0)
        assert est.portion_g == 195
        assert est.category == "brown rice"
        assert est.source == "density_map"

    def test_scaled(self):
        assert infer_by_category("oats", "cups", 0.5).portion_g == 40

    def test_incompatible_unit(self):
        assert infer_by_category("rice", "slice") is None

    def test_unknown_item(self):
        assert infer_by_category("bibimbap", "cup") is None


class TestReparseRaw:
    @pytest.mark.parametrize(
        "text,item_type",
        [
            ("16oz", "drink"),
            ("16oz", "food"),
            ("½ cup", "food"),
            ("1 / 2 cup", "food"),
            ("12 fl oz", "drink"),
            ("1.5 L", "drink"),
            ("grande", "drink"),
            ("2 eggs", "food"),
            ("2 tablespoons", "food"),
            ("large bowl", "food"),
            ("2", "food"),
        ],
    )
    def test_raw_parses_to_same_amount(self, text, item_type):
        first = parse_portion(text, item_type)
        again = parse_portion(first.raw, item_type)
        assert first.raw
        assert again.normalized_g == first.normalized_g
        assert again.normalized_ml == first.normalized_ml
        assert again.multiplier == pytest.approx(first.multiplier)
