"""Jaro-Winkler spell correction against ontology dictionaries."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from rapidfuzz import process
from rapidfuzz.distance import JaroWinkler

from healthnlu.models.signals import Correction, SpellResult
from healthnlu.ontology import lexicons as lx
from healthnlu.ontology import lookup
from healthnlu.ontology.thresholds import SPELL, SPELL_PROTECTED

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3
_WORD_RE = re.compile(r"^[a-z][a-z'-]*$")


def similarity(a: str, b: str) -> float:
    return JaroWinkler.similarity(a.lower(), b.lower())


def correct(word: str, dictionary: Sequence[str], threshold: float = SPELL) -> str | None:
    """Best dictionary entry scoring at least ``threshold`` against ``word``, else None."""
    if not word or not dictionary:
        return None
    match = process.extractOne(
        word.lower(),
        dictionary,
        scorer=JaroWinkler.similarity,
        processor=str.lower,
        score_cutoff=threshold,
    )
    if match is None:
        return None
    return match[0]


def default_dictionaries() -> dict[str, Sequence[str]]:
    return {"vocabulary": lookup.spell_dictionary()}


def _candidates(dictionaries: Mapping[str, Iterable[str]]) -> list[str]:
    seen: dict[str, None] = {}
    for words in dictionaries.values():
        for word in words:
            # A single token is never expanded into a phrase.
            if " " not in word.strip():
                seen[word.strip()] = None
    return list(seen)


def correct_tokens(
    text: str,
    dictionaries: Mapping[str, Iterable[str]] | None = None,
    threshold: float = SPELL,
    protected_threshold: float = SPELL_PROTECTED,
    symptomatic: bool | None = None,
) -> SpellResult:
    """Correct ``text`` word by word and record each substitution.

    Tokens shorter than three characters, tokens that are already ontology
    vocabulary and bowel-movement words are left alone. When the text reads
    as a symptom report every correction must clear ``protected_threshold``.
    """
    dictionaries = dictionaries if dictionaries is not None else default_dictionaries()
    candidates = _candidates(dictionaries)
    if symptomatic is None:
        symptomatic = lookup.has_reflux_keyword(text) or lookup.find_symptom_keyword(text) is not None
    bar = max(threshold, protected_threshold) if symptomatic else threshold
    protected = lookup.protected_vocabulary()

    corrections: list[Correction] = []
    out: list[str] = []
    for word in text.split():
        token = word.lower().strip(".,!?;:")
        if (
            len(token) < MIN_TOKEN_LENGTH
            or not _WORD_RE.match(token)
            or token in lx.BM_PROTECTED
            or token in protected
        ):
            out.append(word)
            continue
        match = correct(token, candidates, bar)
        if match is None or match.lower() == token:
            out.append(word)
            continue
        score = similarity(token, match)
        corrections.append(Correction(original=word, corrected=match, score=round(score, 4)))
        out.append(match)

    if corrections:
        logger.debug("spell corrected %s", [(c.original, c.corrected) for c in corrections])
    return SpellResult(corrected=" ".join(out), corrections=corrections)
