"""Pure helper predicates over the ontology tables."""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable

from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import units

_TOKEN_RE = re.compile(r"[^\s,;!?()\"]+")


def tokenize(text: str) -> list[str]:
    """Lowercased whitespace tokens with surrounding punctuation stripped."""
    tokens = []
    for raw in _TOKEN_RE.findall(text.lower()):
        tok = raw.strip(".:")
        if tok:
            tokens.append(tok)
    return tokens


@functools.lru_cache(maxsize=2048)
def term_pattern(term: str, plural: bool = False) -> re.Pattern[str]:
    body = re.escape(term.lower()).replace(r"\ ", r"\s+")
    suffix = r"(?:e?s)?" if plural else ""
    return re.compile(rf"(?<![\w']){body}{suffix}(?![\w'])", re.I)


def contains_term(text: str, term: str) -> bool:
    return term_pattern(term).search(text) is not None


def find_term(text: str, term: str, plural: bool = False) -> re.Match[str] | None:
    return term_pattern(term, plural).search(text)


def longest_term(text: str, terms: Iterable[str]) -> str | None:
    hits = [t for t in terms if contains_term(text, t)]
    if not hits:
        return None
    return max(hits, key=len)


def first_term(text: str, terms: Iterable[str]) -> str | None:
    for term in terms:
        if contains_term(text, term):
            return term
    return None


def is_beverage(text: str) -> bool:
    return longest_term(text, lx.ALL_BEVERAGES) is not None


def find_beverage(text: str) -> str | None:
    return longest_term(text, lx.ALL_BEVERAGES)


def beverage_category(item: str) -> str | None:
    for category, names in lx.BEVERAGES.items():
        if item.lower() in names:
            return category
    for category, names in lx.BEVERAGES.items():
        if longest_term(item, names):
            return category
    return None


def has_head_noun(text: str) -> bool:
    return any(find_term(text, noun, plural=True) for noun in lx.HEAD_NOUNS)


def has_negation(text: str) -> bool:
    return any(p.search(text) for p in lx.NEGATION_PATTERNS)


def is_minimal_core_food(item: str) -> bool:
    return item.lower().strip() in lx.MINIMAL_CORE_FOODS


def has_food_verb(text: str) -> bool:
    return first_term(text, lx.FOOD_VERBS) is not None


def has_drink_verb(text: str) -> bool:
    return first_term(text, lx.DRINK_VERBS) is not None


def has_reflux_keyword(text: str) -> bool:
    return first_term(text, lx.REFLUX_KEYWORDS) is not None


def find_symptom_keyword(text: str) -> str | None:
    return first_term(text, lx.SYMPTOM_KEYWORDS)


def canonical_symptom(keyword: str) -> str:
    return lx.SYMPTOM_CANONICAL.get(keyword, keyword)


def severity_from_adjectives(text: str) -> tuple[int, str] | None:
    for token in tokenize(text):
        if token in lx.ADJECTIVE_SEVERITY:
            return lx.ADJECTIVE_SEVERITY[token], token
    return None


def bristol_from_descriptors(text: str) -> tuple[int, str] | None:
    """Single-word Bristol adjectives first, then descriptor phrase groups."""
    for token in tokenize(text):
        if token in lx.BRISTOL_ADJ:
            return lx.BRISTOL_ADJ[token], token
    for group, phrases in lx.BM_DESCRIPTORS.items():
        phrase = first_term(text, phrases)
        if phrase:
            return lx.BM_BRISTOL_MAP[group], phrase
    return None


def has_bm_keyword(text: str) -> bool:
    if any(tok in lx.BM_KEYWORDS for tok in tokenize(text)):
        return True
    return first_term(text, lx.BM_PHRASES) is not None


def has_loggable_content(text: str) -> bool:
    return (
        has_head_noun(text)
        or is_beverage(text)
        or has_reflux_keyword(text)
        or find_symptom_keyword(text) is not None
        or has_bm_keyword(text)
    )


def is_unit(token: str) -> bool:
    return token in units.ALL_UNITS


@functools.lru_cache(maxsize=1)
def spell_dictionary() -> tuple[str, ...]:
    """Single-word correction candidates: brands, core foods, beverages, head nouns."""
    words: dict[str, None] = {}
    sources = (
        [b.lower() for b in lx.CEREAL_BRANDS],
        sorted(lx.MINIMAL_CORE_FOODS),
        lx.ALL_BEVERAGES,
        lx.HEAD_NOUNS,
    )
    for source in sources:
        for word in source:
            if " " not in word:
                words[word] = None
    return tuple(words)


@functools.lru_cache(maxsize=1)
def protected_vocabulary() -> frozenset[str]:
    """Every single-word ontology term; a token in this set is already correct."""
    words: set[str] = set(lx.BM_PROTECTED) | set(lx.STOPWORDS) | set(lx.BM_KEYWORDS)
    words |= set(lx.ADJECTIVE_SEVERITY) | set(lx.BRISTOL_ADJ) | set(lx.MOOD_WORDS)
    words |= set(lx.FOOD_VERBS) | set(lx.DRINK_VERBS) | set(lx.MOOD_CUES)
    words |= set(lx.SYMPTOM_CANONICAL) | set(units.ALL_UNITS) | set(units.CAFE_SIZES)
    words |= {
        "feeling", "well", "good", "not", "no", "bit", "cancel", "skip", "skipped",
        "past", "tasty", "really", "much", "more", "less", "later", "went", "after",
        "before", "ready", "home", "whole", "half",
    }
    phrases = (
        lx.REFLUX_KEYWORDS + lx.SYMPTOM_KEYWORDS + lx.ALL_BEVERAGES + lx.HEAD_NOUNS
        + tuple(units.GENERIC_DRINK_SIZES) + tuple(units.DENSITY_MAP)
        + lx.DAIRY_ITEMS + lx.NON_DAIRY_ITEMS + lx.CAFFEINATED_ITEMS + lx.DECAF_FLAGS
        + lx.CONDIMENTS + lx.CEREAL_BRANDS + lx.MILK_AND_CHAI_BRANDS
    )
    for phrase in phrases:
        words.update(phrase.lower().split())
    for group in lx.BM_DESCRIPTORS.values():
        for phrase in group:
            words.update(phrase.split())
    return frozenset(words)
