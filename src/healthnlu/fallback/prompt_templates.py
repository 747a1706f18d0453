"""Prompt templates for the external slot-extraction fallback."""

from __future__ import annotations

SYSTEM_PROMPT = """\
You extract structured health-log entries from short, informal messages. Classify the
message into one of these intents:

- food: something eaten. Slot: item (the food, without quantities).
- drink: something drunk. Slot: item (the beverage).
- symptom: pain, bloating, nausea or similar. Slots: symptom_type, severity (1-10).
- reflux: heartburn or acid reflux. Slot: severity (1-10).
- bm: a bowel movement. Slot: bristol (Bristol stool scale 1-7, as a string).
- mood: how the user feels emotionally. Slot: mood.
- other: anything else.

Respond ONLY with valid JSON matching the provided schema. Use null for any slot the
message does not state; never guess a severity or Bristol value that is not implied.
Provide a confidence score between 0.0 and 1.0.
"""

USER_PROMPT_TEMPLATE = """\
Message: {text}

Extract the intent and slots.
"""
