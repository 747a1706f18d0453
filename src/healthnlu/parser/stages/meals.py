"""Food and drink stages: item extraction, portion tagging and classification."""

from __future__ import annotations

import logging

from healthnlu.models.intent import IntentType
from healthnlu.models.result import ParseResult, SecondarySlot
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup
from healthnlu.parser.items import extract_item_and_sides
from healthnlu.parser.portion import extract_portion, infer_by_category, parse_portion
from healthnlu.parser.stages.base import ExtractionStage, ExtractionState

logger = logging.getLogger(__name__)

CONFIDENCE_CAP = 0.95


def item_type_for(state: ExtractionState) -> str:
    """``drink`` when the item is a beverage or only a drink verb was used."""
    item = state.result.item
    if item and lookup.is_beverage(item):
        return "drink"
    text = state.cleaned
    if lookup.has_drink_verb(text) and not lookup.has_food_verb(text):
        return "drink"
    return "food"


def tag_portion_and_metadata(state: ExtractionState, item_type: str) -> None:
    result = state.result
    text = state.cleaned
    implied = state.items.implied_portion if state.items else None

    portion = extract_portion(text, item_type)
    if portion is None and implied:
        portion = parse_portion(implied, item_type)
    if portion is not None:
        result.set_slot("portion", portion.raw)
        result.set_slot("portion_g", portion.normalized_g)
        result.set_slot("portion_ml", portion.normalized_ml)
        result.set_slot("portion_multiplier", portion.multiplier)
        if portion.normalized_g is None and result.item and portion.unit:
            estimate = infer_by_category(result.item, portion.unit, portion.quantity or 1.0)
            if estimate is not None:
                result.set_slot("portion_g", estimate.portion_g)

    non_dairy = lookup.longest_term(text, lx.NON_DAIRY_ITEMS) is not None
    dairy = lookup.longest_term(text, lx.DAIRY_ITEMS) is not None
    if non_dairy:
        result.set_slot("non_dairy", True)
    elif dairy:
        result.set_slot("dairy", True)

    decaf = lookup.longest_term(text, lx.DECAF_FLAGS) is not None
    caffeine = lookup.longest_term(text, lx.CAFFEINATED_ITEMS) is not None
    if decaf:
        result.set_slot("decaf", True)
    elif caffeine:
        result.set_slot("caffeine", True)

    variant = lookup.longest_term(text, lx.MILK_AND_CHAI_BRANDS)
    if variant:
        result.set_slot("brand_variant", variant)


class ItemStage(ExtractionStage):
    """Extract item, sides and a secondary beverage; never finishes on its own."""

    name = "items"

    def run(self, state: ExtractionState) -> ParseResult | None:
        items = extract_item_and_sides(state.cleaned)
        if items.generic:
            has_verb = lookup.has_food_verb(state.cleaned) or lookup.has_drink_verb(state.cleaned)
            if not (has_verb or state.time_info.is_explicit):
                items.item = None
        state.items = items
        result = state.result
        result.set_slot("item", items.item)
        result.set_slot("sides", items.sides)
        result.set_slot("brand", items.brand)
        result.meta.has_head_noun = items.has_head_noun
        result.meta.rescued_by = items.rescued_by
        if items.rescued_by is not None:
            logger.info("rescue %s fired for %r", items.rescued_by.value, state.raw_text)
        if items.item:
            result.meta.minimal_core_food = lookup.is_minimal_core_food(items.item)
        if items.secondary_beverage:
            result.set_secondary(SecondarySlot(item=items.secondary_beverage))
        return None


class TaggingStage(ExtractionStage):
    name = "tagging"

    def run(self, state: ExtractionState) -> ParseResult | None:
        if state.result.item:
            tag_portion_and_metadata(state, item_type_for(state))
        return None


class FoodDrinkStage(ExtractionStage):
    """Action-verb food and drink logs, plus bare beverage names."""

    name = "food_drink"

    def run(self, state: ExtractionState) -> ParseResult | None:
        text = state.cleaned
        result = state.result
        item = result.item
        food_verb = lookup.has_food_verb(text)
        drink_verb = lookup.has_drink_verb(text)
        beverage_item = bool(item) and lookup.is_beverage(item)
        if not (food_verb or drink_verb or beverage_item):
            return None

        is_drink = beverage_item or (drink_verb and not food_verb)
        intent = IntentType.DRINK if is_drink else IntentType.FOOD
        if is_drink and not item:
            item = lookup.find_beverage(text)
            result.set_slot("item", item)
            beverage_item = bool(item)

        if not item:
            confidence = 0.65
        elif state.items is not None and state.items.generic:
            confidence = 0.66
        elif is_drink and beverage_item:
            confidence = 0.80
        else:
            confidence = 0.75
        if result.meta.has_head_noun:
            confidence += 0.05
        if state.time_info.is_explicit:
            confidence += 0.05

        result.require("item")
        state.infer_time()
        return state.finish(intent, min(confidence, CONFIDENCE_CAP))


class NounOnlyMealStage(ExtractionStage):
    """Terse logs like "oatmeal breakfast": a head noun plus a stated meal or time."""

    name = "noun_only_meal"

    def run(self, state: ExtractionState) -> ParseResult | None:
        result = state.result
        if not (result.item and result.meta.has_head_noun):
            return None
        if not state.time_info.is_explicit:
            return None
        result.meta.noun_only_meal_pattern = True
        return state.finish(IntentType.FOOD, 0.85)


class BareItemStage(ExtractionStage):
    """A head-noun item with no verb and no stated time; meal window is inferred."""

    name = "bare_item"

    def run(self, state: ExtractionState) -> ParseResult | None:
        result = state.result
        if not (result.item and result.meta.has_head_noun):
            return None
        state.infer_time()
        return state.finish(IntentType.FOOD, 0.70)
