"""
Rule tables for query understanding.

Entity extraction, intent classification, sentiment analysis and query
expansion all read these tables; none of them hard-code vocabulary. Extending
the engine to a new category, color family or intent cue means editing this
module only.
"""
from typing import Dict, List, Tuple

# Tokenizer stop words (articles, conjunctions, common auxiliary verbs).
# Terms of length <= 2 are already dropped by the tokenizer.
STOP_WORDS = frozenset(
    [
        "the",
        "and",
        "but",
        "nor",
        "for",
        "with",
        "from",
        "this",
        "that",
        "are",
        "was",
        "were",
        "been",
        "being",
        "have",
        "has",
        "had",
    ]
)

# Canonical color -> lexical variants
COLOR_VARIANTS: Dict[str, List[str]] = {
    "blue": ["blue", "navy", "azure", "cobalt", "sapphire", "indigo"],
    "red": ["red", "crimson", "scarlet", "maroon", "burgundy", "ruby"],
    "green": ["green", "emerald", "olive", "lime", "forest", "mint"],
    "yellow": ["yellow", "gold", "golden", "amber", "mustard"],
    "black": ["black", "dark", "ebony", "charcoal"],
    "white": ["white", "cream", "ivory", "pearl", "snow"],
    "pink": ["pink", "rose", "blush", "coral", "salmon"],
    "purple": ["purple", "violet", "lavender", "plum", "mauve"],
    "orange": ["orange", "coral", "peach", "tangerine"],
    "brown": ["brown", "tan", "beige", "khaki", "chocolate"],
    "gray": ["gray", "grey", "silver", "slate"],
}

# Canonical catalog category -> lexical variants
CATEGORY_VARIANTS: Dict[str, List[str]] = {
    "Jackets": ["jacket", "jackets", "blazer", "coat", "outerwear", "cardigan"],
    "Dresses": ["dress", "dresses", "gown", "frock", "sundress", "maxi"],
    "Shirts": ["shirt", "shirts", "blouse", "top", "tops", "tee", "tshirt"],
    "Pants": ["pants", "trousers", "jeans", "slacks", "chinos", "leggings"],
    "Skirts": ["skirt", "skirts", "mini", "midi"],
    "Shoes": ["shoes", "footwear", "sneakers", "heels", "boots", "sandals", "flats"],
    "Bags": ["bag", "bags", "handbag", "purse", "backpack", "tote", "clutch"],
    "Accessories": [
        "accessory",
        "accessories",
        "jewelry",
        "jewellery",
        "watch",
        "belt",
        "scarf",
        "hat",
    ],
}

MATERIALS: List[str] = [
    "cotton",
    "silk",
    "leather",
    "denim",
    "wool",
    "polyester",
    "linen",
    "ankara",
    "velvet",
    "satin",
]

# Sizes are matched as whole words and reported upper-cased
SIZES: List[str] = ["xs", "small", "medium", "large", "xl", "xxl", "s", "m", "l"]

# Attribute type -> keywords
ATTRIBUTE_KEYWORDS: Dict[str, List[str]] = {
    "style": ["casual", "formal", "elegant", "sporty", "vintage", "modern", "classic"],
    "occasion": ["party", "wedding", "office", "beach", "gym", "date"],
    "season": ["summer", "winter", "spring", "fall", "autumn"],
    "fit": ["slim", "regular", "loose", "tight", "oversized"],
}

# Price phrases, tried in order; the first match wins.
# Each entry: (pattern, bound) where bound is "max", "min" or "range".
_AMOUNT = r"(?:rwf|frw|usd|\$)?\s*(\d[\d,]*(?:\.\d+)?)"

PRICE_PATTERNS: List[Tuple[str, str]] = [
    (r"\bunder\s+" + _AMOUNT, "max"),
    (r"\bbelow\s+" + _AMOUNT, "max"),
    (r"\bless\s+than\s+" + _AMOUNT, "max"),
    (r"\bcheaper\s+than\s+" + _AMOUNT, "max"),
    (r"\bmax(?:imum)?\s+" + _AMOUNT, "max"),
    (r"\babove\s+" + _AMOUNT, "min"),
    (r"\bover\s+" + _AMOUNT, "min"),
    (r"\bmore\s+than\s+" + _AMOUNT, "min"),
    (r"\bbetween\s+" + _AMOUNT + r"\s+and\s+" + _AMOUNT, "range"),
    (r"(?<![\w.])(\d[\d,]*(?:\.\d+)?)\s*-\s*(\d[\d,]*(?:\.\d+)?)(?![\w.])", "range"),
    (r"\baround\s+" + _AMOUNT, "max"),
    (r"\babout\s+" + _AMOUNT, "max"),
]

# Intent rules: (label, pattern, confidence). Confidence is fixed per rule and
# reflects how specific the cue is; rules are evaluated in this order and all
# matching rules are reported.
INTENT_RULES: List[Tuple[str, str, float]] = [
    ("search", r"\b(find|show|get|search|looking|want|need)\b", 0.90),
    ("recommend", r"\b(recommend|suggest|advice|what\s+should|help\s+me\s+choose)\b", 0.95),
    ("compare", r"\b(compare|versus|vs|difference|better|which\s+one)\b", 0.90),
    ("question", r"\b(what|how|why|when|where|who|can\s+you)\b", 0.85),
    ("browse", r"\b(browse|explore|see\s+all|show\s+everything)\b", 0.90),
    ("filter", r"\b(filter|narrow|refine|specific)\b", 0.85),
    ("purchase", r"\b(buy|purchase|order|get\s+me|i\s+want\s+to\s+buy)\b", 0.95),
]

INTENT_LABELS = ("search", "recommend", "compare", "question", "browse", "filter", "purchase")

DEFAULT_INTENT: Tuple[str, float] = ("search", 0.5)

# Sentiment cue words
POSITIVE_WORDS = ["love", "great", "awesome", "perfect", "beautiful", "amazing", "excellent", "best"]
NEGATIVE_WORDS = ["hate", "bad", "terrible", "awful", "ugly", "worst", "disappointed"]
URGENT_WORDS = ["urgent", "asap", "quickly", "fast", "hurry", "now", "immediately"]

# Query expansion synonyms
QUERY_SYNONYMS: Dict[str, List[str]] = {
    "cheap": ["affordable", "budget", "inexpensive", "low price"],
    "expensive": ["premium", "luxury", "high end", "costly"],
    "new": ["latest", "recent", "fresh", "just in"],
    "popular": ["trending", "bestseller", "hot", "top"],
    "jacket": ["blazer", "coat", "outerwear"],
    "dress": ["gown", "frock"],
    "shoes": ["footwear", "sneakers", "boots"],
}
