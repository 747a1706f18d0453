"""Item and sides extraction with brand, construction and head-noun anchoring."""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel

from healthnlu.models.intent import RescueStrategy
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup

logger = logging.getLogger(__name__)

MAX_MODIFIERS = 2

_WITH_RE = re.compile(r"\bwith\b", re.I)
_AMP_RE = re.compile(r"\s+&\s+")
_AND_RE = re.compile(r"\s+and\s+(?!a\s)", re.I)
_NUMBER_RE = re.compile(r"^[\d.,/½¼¾⅓⅔⅛⅜⅝⅞%]+[a-z]*$")
_LEADING_FILLER = lx.STOPWORDS | frozenset(lx.FOOD_VERBS) | frozenset(lx.DRINK_VERBS)


class ItemExtraction(BaseModel):
    item: str | None = None
    sides: str | None = None
    has_head_noun: bool = False
    secondary_beverage: str | None = None
    rescued_by: RescueStrategy | None = None
    implied_portion: str | None = None
    brand: str | None = None
    generic: bool = False


def strip_meal_suffix(text: str) -> str:
    return lx.MEAL_SUFFIX_PATTERN.sub("", text).strip()


def split_clauses(text: str) -> tuple[str, str | None]:
    """Split on the strongest separator: "with", then "&", then "and".

    "and" only splits when the right-hand clause names a food or beverage of
    its own, so dish names joined by "and" stay whole.
    """
    if _WITH_RE.search(text):
        main, side = _WITH_RE.split(text, maxsplit=1)
        return main.strip(), side.strip() or None
    if _AMP_RE.search(text):
        main, side = _AMP_RE.split(text, maxsplit=1)
        return main.strip(), side.strip() or None
    if _AND_RE.search(text):
        main, side = _AND_RE.split(text, maxsplit=1)
        if lookup.has_head_noun(side) or lookup.is_beverage(side):
            return main.strip(), side.strip() or None
    return text.strip(), None


def _is_boundary_token(token: str) -> bool:
    return (
        token in lx.STOPWORDS
        or token in lx.FOOD_VERBS
        or token in lx.DRINK_VERBS
        or lookup.is_unit(token)
        or bool(_NUMBER_RE.match(token))
    )


def find_egg_construction(chunk: str) -> tuple[str, str] | None:
    pattern = lookup.longest_term(chunk, lx.EGG_CONSTRUCTIONS)
    if pattern is None:
        return None
    return lx.EGG_CONSTRUCTIONS[pattern]


def find_cereal_brand(chunk: str) -> str | None:
    brand = lookup.longest_term(chunk, lx.CEREAL_BRANDS)
    if brand is not None:
        return brand
    variant = lookup.longest_term(chunk, lx.CEREAL_VARIANTS)
    if variant is not None:
        return lx.CEREAL_VARIANTS[variant]
    return None


def choose_head_noun_item(chunk: str | None) -> str | None:
    """Anchor on the first head noun by lexicon priority, keeping up to two modifiers."""
    if not chunk:
        return None
    lowered = chunk.lower()
    for noun in lx.HEAD_NOUNS:
        match = lookup.find_term(lowered, noun, plural=True)
        if match is None:
            continue
        before = lookup.tokenize(lowered[: match.start()])
        modifiers: list[str] = []
        for token in reversed(before):
            if len(modifiers) == MAX_MODIFIERS or _is_boundary_token(token):
                break
            modifiers.insert(0, token)
        head = " ".join(match.group(0).split())
        return " ".join(modifiers + [head])
    return None


def generic_noun(chunk: str | None) -> str | None:
    """Longest run of content words once stopwords, verbs and quantities are removed."""
    if not chunk:
        return None
    runs: list[list[str]] = [[]]
    for token in lookup.tokenize(chunk):
        if _is_boundary_token(token) or token in lx.MEAL_KEYWORDS:
            if runs[-1]:
                runs.append([])
            continue
        runs[-1].append(token)
    candidates = [" ".join(r) for r in runs if r]
    if not candidates:
        return None
    return max(candidates, key=len)


def tidy_phrase(chunk: str | None) -> str | None:
    if not chunk:
        return None
    tokens = chunk.split()
    while tokens and tokens[0].lower() in _LEADING_FILLER:
        tokens.pop(0)
    tidy = " ".join(tokens).strip(" ,.")
    return tidy or None


def extract_item_and_sides(text: str) -> ItemExtraction:
    result = ItemExtraction()
    cleaned = strip_meal_suffix(text)
    main, side = split_clauses(cleaned)

    construction = find_egg_construction(main)
    brand = None if construction else find_cereal_brand(main)
    if construction is not None:
        result.item, result.implied_portion = construction
        result.has_head_noun = True
    elif brand is not None:
        result.item = f"{brand} cereal"
        result.brand = brand
        result.has_head_noun = True
    else:
        item = choose_head_noun_item(main)
        if item:
            result.item = item
            result.has_head_noun = True

    if side:
        result.secondary_beverage = lookup.find_beverage(side)

    if not result.item and side:
        side_item = choose_head_noun_item(side)
        if side_item:
            result.item = side_item
            result.sides = tidy_phrase(main)
            result.has_head_noun = True
            result.rescued_by = RescueStrategy.SWAP_SIDES
            if result.secondary_beverage and result.secondary_beverage in side_item:
                result.secondary_beverage = None
            logger.debug("swapped main and sides, chose %r", side_item)

    if not result.item and result.secondary_beverage:
        result.item = result.secondary_beverage
        result.has_head_noun = True
        result.rescued_by = RescueStrategy.PROMOTE_BEVERAGE
        result.secondary_beverage = None
        logger.debug("promoted beverage %r to primary", result.item)

    if not result.item:
        noun = generic_noun(main)
        if noun:
            result.item = noun
            result.generic = True

    if side and result.rescued_by is None and not result.secondary_beverage:
        result.sides = tidy_phrase(side)
    return result
