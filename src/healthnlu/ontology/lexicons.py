"""Read-only word lists and maps used by the rules extractor."""

from __future__ import annotations

import re
from types import MappingProxyType

# Anchor nouns in priority order: multi-word dishes, dishes, then ingredients
# and beverages, so "chicken salad" anchors on "salad".
HEAD_NOUNS: tuple[str, ...] = (
    "hash browns", "stir fry", "protein shake", "egg salad",
    "sandwich", "salad", "wrap", "burger", "pizza", "pasta", "noodles",
    "soup", "stew", "chili", "curry",
    "taco", "burrito", "quesadilla", "nachos", "enchilada",
    "omelet", "omelette", "scramble", "toast", "bagel", "muffin", "pancake",
    "waffle", "croissant", "scone", "biscuit",
    "cereal", "oatmeal", "oats", "granola", "muesli", "porridge",
    "rice", "quinoa", "farro",
    "eggs", "egg",
    "chicken", "beef", "pork", "fish", "salmon", "tuna", "turkey", "tofu", "tempeh",
    "yogurt", "smoothie", "shake", "bar", "crackers", "chips", "pretzels", "nuts", "bowl",
    "banana", "apple", "berries",
    "tea", "coffee", "latte", "cappuccino", "espresso", "americano", "macchiato",
    "mocha", "chai", "matcha", "cocoa", "juice", "water", "milk",
)

EGG_CONSTRUCTIONS = MappingProxyType({
    "egg cup": ("eggs", "1 cup"),
    "egg cups": ("eggs", "1 cup"),
    "egg bite": ("egg bites", "1 bite"),
    "egg bites": ("egg bites", "1 bite"),
    "egg muffin": ("egg muffin", "1 muffin"),
    "egg muffins": ("egg muffins", "1 muffin"),
})

CEREAL_BRANDS: tuple[str, ...] = (
    "Life", "Cheerios", "Honey Nut Cheerios", "Raisin Bran", "Frosted Flakes",
    "Corn Flakes", "Rice Krispies", "Special K", "Cinnamon Toast Crunch", "Kashi",
    "Grape-Nuts", "Grape Nuts", "Honey Bunches of Oats", "Mini-Wheats", "Trix",
    "Cocoa Puffs", "Lucky Charms", "Cap'n Crunch", "Golden Grahams", "Froot Loops",
    "Apple Jacks", "Wheaties", "Chex", "Fiber One", "All-Bran", "Kix",
)

CEREAL_VARIANTS = MappingProxyType({
    "cheerious": "Cheerios",
    "cheerio": "Cheerios",
    "grapenuts": "Grape-Nuts",
    "fruit loops": "Froot Loops",
    "capn crunch": "Cap'n Crunch",
    "captain crunch": "Cap'n Crunch",
    "captian crunch": "Cap'n Crunch",
})

BEVERAGES = MappingProxyType({
    "tea": (
        "tea", "jasmine tea", "green tea", "black tea", "white tea", "oolong",
        "herbal tea", "chamomile", "peppermint tea", "ginger tea", "earl grey",
        "english breakfast", "chai", "matcha", "sencha", "rooibos",
    ),
    "coffee": (
        "coffee", "espresso", "latte", "cappuccino", "americano", "macchiato", "mocha",
        "flat white", "cortado", "cold brew", "iced coffee", "frappuccino", "café",
    ),
    "milk": (
        "milk", "oat milk", "almond milk", "soy milk", "coconut milk", "cashew milk",
        "dairy milk", "whole milk", "2% milk", "skim milk", "nonfat milk",
    ),
    "juice": ("juice", "orange juice", "apple juice", "grape juice", "cranberry juice", "oj"),
    "water": ("water", "sparkling water", "seltzer", "club soda", "tonic"),
    "soda": ("soda", "pop", "coke", "pepsi", "sprite", "dr pepper", "mountain dew", "ginger ale"),
    "alcohol": (
        "beer", "wine", "red wine", "white wine", "cocktail", "margarita", "vodka",
        "whiskey", "rum", "gin", "sake", "champagne", "prosecco",
    ),
    "other": ("smoothie", "shake", "protein shake", "energy drink", "sports drink", "kombucha"),
})

ALL_BEVERAGES: tuple[str, ...] = tuple(b for group in BEVERAGES.values() for b in group)

OAT_MILK_BRANDS: tuple[str, ...] = (
    "Oatly", "Oatly Barista", "Oatly Unsweetened", "Oatly Low Fat",
    "Planet Oat", "Chobani Oat", "Califia Oat", "Minor Figures",
)
ALMOND_MILK_BRANDS: tuple[str, ...] = (
    "Almond Breeze", "Silk Almond", "Califia Almond", "Blue Diamond",
)
CHAI_BRANDS: tuple[str, ...] = ("Oregon Chai", "Tazo Chai", "Pacific Chai", "David Rio")
MILK_AND_CHAI_BRANDS: tuple[str, ...] = OAT_MILK_BRANDS + ALMOND_MILK_BRANDS + CHAI_BRANDS

DAIRY_ITEMS: tuple[str, ...] = (
    "milk", "cream", "half and half", "cheese", "butter", "yogurt",
    "ice cream", "whipped cream", "sour cream", "latte", "cappuccino",
)
NON_DAIRY_ITEMS: tuple[str, ...] = (
    "oat milk", "almond milk", "soy milk", "coconut milk", "cashew milk", "rice milk",
    "oat", "almond", "soy", "coconut", "oatly", "non-dairy", "dairy-free", "dairy free",
)

CAFFEINATED_ITEMS: tuple[str, ...] = (
    "coffee", "espresso", "latte", "cappuccino", "americano", "macchiato", "mocha",
    "cold brew", "iced coffee", "frappuccino",
    "black tea", "green tea", "white tea", "oolong", "earl grey", "english breakfast",
    "chai", "matcha", "yerba mate",
    "energy drink", "red bull", "monster", "rockstar",
    "cola", "coke", "pepsi", "dr pepper", "mountain dew",
)
DECAF_FLAGS: tuple[str, ...] = (
    "decaf", "decaffeinated", "half caf", "half-caf", "no caffeine", "caffeine-free",
)

# Sides and condiments that sit close to other dictionary words.
CONDIMENTS: tuple[str, ...] = (
    "salsa", "guacamole", "guac", "hummus", "ketchup", "mustard", "mayo", "mayonnaise",
    "ranch", "gravy", "jam", "jelly", "syrup", "honey", "dressing", "sauce", "pesto",
    "sriracha", "relish", "chips", "fries", "crackers",
)

ADJECTIVE_SEVERITY = MappingProxyType({
    "tiny": 1, "slight": 2, "minor": 2, "mild": 2, "little": 2, "light": 3,
    "some": 4, "moderate": 5, "medium": 5, "okay": 5, "noticeable": 5,
    "bad": 7, "strong": 7, "uncomfortable": 7, "rough": 7, "intense": 8,
    "severe": 9, "awful": 9, "terrible": 9, "horrible": 9, "worst": 10, "unbearable": 10,
})

BM_KEYWORDS: frozenset[str] = frozenset({
    "poop", "poops", "pooping", "pooped", "poo",
    "bm", "stool", "stools",
    "bowel", "bowels",
    "bathroom", "toilet",
    "diarrhea", "diarrhoea", "constipation", "constipated",
})
BM_PHRASES: tuple[str, ...] = ("bowel movement", "went to the bathroom", "had to go")

BRISTOL_ADJ = MappingProxyType({
    "loose": 6, "watery": 7, "diarrhea": 7, "diarrhoea": 7, "liquid": 7,
    "hard": 2, "pellet": 1, "pellets": 1, "pebbles": 1,
    "constipated": 2, "constipation": 2, "normal": 4, "formed": 4,
})

# Descriptor phrases grouped by consistency; consulted after BRISTOL_ADJ.
BM_DESCRIPTORS = MappingProxyType({
    "loose": (
        "bad poop", "bathroom was rough", "runny", "urgent", "explosive",
    ),
    "hard": ("rocky", "dry", "difficult", "painful"),
    "normal": ("good", "healthy", "regular", "fine", "solid"),
})
BM_BRISTOL_MAP = MappingProxyType({"loose": 6, "watery": 7, "hard": 2, "pellets": 1, "normal": 4})

# Words that are never spell-corrected, regardless of context.
BM_PROTECTED: frozenset[str] = frozenset({
    "poop", "poops", "pooping", "pooped", "poo",
    "bm", "stool", "stools", "bowel", "bowels", "bowel-movement",
    "constipation", "constipated", "diarrhea", "diarrhoea",
    "loose", "watery", "hard", "pellet", "pellets", "pebbles",
    "bristol", "toilet", "bathroom",
})

REFLUX_KEYWORDS: tuple[str, ...] = (
    "acid reflux", "burning chest", "reflux", "heartburn", "acid", "gerd",
)

SYMPTOM_KEYWORDS: tuple[str, ...] = (
    "stomach pain", "stomachache", "pain", "ache", "aching", "cramp", "cramps", "cramping",
    "hurt", "hurts", "bloat", "bloated", "bloating", "gassy", "gas",
    "nausea", "nauseous", "queasy", "sick", "puke", "vomit",
)

SYMPTOM_CANONICAL = MappingProxyType({
    "heartburn": "reflux", "acid": "reflux", "burning": "reflux", "gerd": "reflux",
    "stomachache": "pain", "stomach pain": "pain", "cramp": "pain", "cramps": "pain",
    "cramping": "pain", "ache": "pain", "aching": "pain", "hurt": "pain", "hurts": "pain",
    "gas": "bloat", "gassy": "bloat", "bloated": "bloat", "bloating": "bloat", "full": "bloat",
    "queasy": "nausea", "nauseous": "nausea", "sick": "nausea", "puke": "nausea",
    "vomit": "nausea",
})

MOOD_WORDS = MappingProxyType({
    "happy": "happy", "great": "happy", "content": "happy",
    "sad": "sad", "down": "sad", "depressed": "sad",
    "anxious": "anxious", "nervous": "anxious", "worried": "anxious",
    "stressed": "stressed", "overwhelmed": "stressed",
    "tired": "tired", "exhausted": "tired", "drained": "tired",
    "calm": "calm", "relaxed": "calm",
    "irritable": "irritable", "cranky": "irritable", "angry": "irritable",
    "energetic": "energetic",
})
MOOD_CUES: tuple[str, ...] = ("mood", "feeling", "feel", "felt", "i'm", "im")

NEGATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(no|not|didn't|didnt|haven't|skipped|avoiding|cut\s+out|gave\s+up)\b", re.I),
    re.compile(r"\b(without|minus)\b", re.I),
)
CHECKIN_PATTERN = re.compile(
    r"\b(skip|skipped|skipping|avoided|didn'?t\s+(?:have|eat|drink)|no\s+\w+\s+today)\b", re.I
)

GREETING_PATTERN = re.compile(
    r"^(good\s*morning|good\s*evening|good\s*afternoon|hey|hi|hello|yo|sup|what'?s\s*up)\b", re.I
)
THANKS_PATTERN = re.compile(r"^(thanks|thank\s*you|ty|thx|appreciate|cheers)\b", re.I)
CHIT_CHAT_PATTERN = re.compile(
    r"^(lol|haha|ok|okay|cool|nice|awesome|great|perfect|got\s*it|sure|yep|yeah|nope|nah)\b", re.I
)
FAREWELL_PATTERN = re.compile(
    r"^(bye|goodbye|good\s*bye|see\s*ya|see\s*you|later|night|good\s*night|gn|ttyl|talk\s*later)\b",
    re.I,
)

CANCEL_WORDS: frozenset[str] = frozenset({
    "cancel", "never mind", "nevermind", "nvm", "forget it", "stop",
})

FOOD_VERBS: tuple[str, ...] = (
    "ate", "eaten", "eat", "eating", "had", "having", "have", "consumed",
    "finished", "grabbed", "made", "cooked", "prepared", "snacked",
)
DRINK_VERBS: tuple[str, ...] = (
    "drank", "drink", "drinking", "sipped", "sipping", "chugged",
)

MINIMAL_CORE_FOODS: frozenset[str] = frozenset({
    "egg", "eggs", "rice", "tea", "toast", "soup", "salad", "fish",
    "milk", "water", "coffee", "chai", "oats", "pizza", "pasta",
})

STOPWORDS: frozenset[str] = frozenset({
    "had", "ate", "drank", "got", "having", "eating", "drinking",
    "the", "a", "an", "some", "for", "at", "with", "and", "of",
    "i", "me", "my", "just", "also", "then", "this", "that", "was", "were",
    "is", "am", "are", "to", "in", "on", "it", "its", "so", "too", "very",
    "something", "stuff", "thing", "things", "today", "yesterday", "now",
    "morning", "evening", "afternoon", "night", "tonight", "earlier",
    "breakfast", "lunch", "dinner", "supper", "snack", "brekkie",
})

MEAL_KEYWORDS = MappingProxyType({
    "breakfast": ("breakfast", "brekkie"),
    "lunch": ("lunch",),
    "dinner": ("dinner", "supper"),
    "snack": ("snack",),
})

MEAL_SUFFIX_PATTERN = re.compile(
    r"\s+(?:for|at|during)\s+(?:breakfast|lunch|dinner|supper|snack)\b.*$", re.I
)
MEAL_PHRASE_PATTERN = re.compile(
    r"\s*\b(?:for|at|during)\s+(?:breakfast|lunch|dinner|supper|snack)\b", re.I
)

CLARIFICATION_NEEDED = "clarification_needed"
