"""JSON schema for OpenAI structured output."""

from __future__ import annotations

_NULLABLE_STRING = {"type": ["string", "null"]}

FALLBACK_JSON_SCHEMA: dict = {
    "name": "health_log_entry",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "intent": {
                "type": "string",
                "enum": ["food", "drink", "symptom", "reflux", "bm", "mood", "other"],
                "description": "The classified intent.",
            },
            "confidence": {
                "type": "number",
                "description": "Confidence score between 0.0 and 1.0.",
            },
            "slots": {
                "type": "object",
                "properties": {
                    "item": {**_NULLABLE_STRING, "description": "Food or beverage name."},
                    "symptom_type": {**_NULLABLE_STRING, "description": "pain, bloat, nausea..."},
                    "severity": {
                        "type": ["integer", "null"],
                        "description": "Severity from 1 to 10.",
                    },
                    "bristol": {**_NULLABLE_STRING, "description": "Bristol type 1-7."},
                    "mood": {**_NULLABLE_STRING, "description": "Mood word."},
                    "meal_time": {
                        **_NULLABLE_STRING,
                        "description": "breakfast, lunch, snack, dinner or late.",
                    },
                },
                "required": ["item", "symptom_type", "severity", "bristol", "mood", "meal_time"],
                "additionalProperties": False,
            },
        },
        "required": ["intent", "confidence", "slots"],
        "additionalProperties": False,
    },
}
