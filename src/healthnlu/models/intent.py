"""Intent, decision and rescue enumerations plus the required-slot table."""

from __future__ import annotations

import enum
from types import MappingProxyType


class IntentType(str, enum.Enum):
    FOOD = "food"
    DRINK = "drink"
    SYMPTOM = "symptom"
    REFLUX = "reflux"
    BM = "bm"
    MOOD = "mood"
    CHECKIN = "checkin"
    GREETING = "greeting"
    THANKS = "thanks"
    CHIT_CHAT = "chit_chat"
    FAREWELL = "farewell"
    OTHER = "other"


class Decision(str, enum.Enum):
    STRICT = "strict"
    LENIENT = "lenient"
    MINIMAL_CORE = "minimal_core"
    RESCUED_SWAP_SIDES = "rescued_swap_sides"
    RESCUED_PROMOTE_BEVERAGE = "rescued_promote_beverage"
    RESCUED_LLM = "rescued_llm"
    NEEDS_CLARIFICATION = "needs_clarification"
    REJECTED = "rejected"
    DEFAULT = "default"


class RescueStrategy(str, enum.Enum):
    SWAP_SIDES = "swap_sides"
    PROMOTE_BEVERAGE = "promote_beverage"


REQUIRED_SLOTS = MappingProxyType({
    IntentType.FOOD: ("item",),
    IntentType.DRINK: ("item",),
    IntentType.SYMPTOM: ("severity",),
    IntentType.REFLUX: ("severity",),
    IntentType.BM: ("bristol",),
})

LOGGABLE_INTENTS: frozenset[IntentType] = frozenset({
    IntentType.FOOD,
    IntentType.DRINK,
    IntentType.SYMPTOM,
    IntentType.REFLUX,
    IntentType.BM,
    IntentType.MOOD,
    IntentType.CHECKIN,
})

CONVERSATIONAL_INTENTS: frozenset[IntentType] = frozenset({
    IntentType.GREETING,
    IntentType.THANKS,
    IntentType.CHIT_CHAT,
    IntentType.FAREWELL,
})

ACCEPTED_DECISIONS: frozenset[Decision] = frozenset({
    Decision.STRICT,
    Decision.LENIENT,
    Decision.MINIMAL_CORE,
    Decision.RESCUED_SWAP_SIDES,
    Decision.RESCUED_PROMOTE_BEVERAGE,
    Decision.RESCUED_LLM,
    Decision.DEFAULT,
})

RESCUE_DECISIONS = MappingProxyType({
    RescueStrategy.SWAP_SIDES: Decision.RESCUED_SWAP_SIDES,
    RescueStrategy.PROMOTE_BEVERAGE: Decision.RESCUED_PROMOTE_BEVERAGE,
})
