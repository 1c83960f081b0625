"""Pattern tables for heuristic detectors and adapter fallbacks.

Regex strings are compiled by the consumers (case-insensitive). Phrase lists
are matched against lowercased text. Keeping every table here means tuning a
detector never requires touching its scoring code.
"""

from typing import Dict, List, Tuple

# ── Lexical signals (pattern detector) ─────────────────────────────────────

AI_SELF_REFERENCE_PATTERNS: List[str] = [
    r"\bas an? (ai|bot|language model|ai language model)\b",
    r"\bi am an? (ai|bot|language model)\b",
]

SUPERLATIVE_WORDS: List[str] = [
    "amazing",
    "excellent",
    "perfect",
    "outstanding",
    "incredible",
    "fantastic",
    "wonderful",
    "awesome",
    "flawless",
    "phenomenal",
    "best",
]

# Hedging or negative words that real reviewers use
NEGATIVE_WORDS: List[str] = [
    "but",
    "however",
    "although",
    "issue",
    "issues",
    "problem",
    "problems",
    "bug",
    "bugs",
    "crash",
    "crashes",
    "wish",
    "could",
    "drain",
    "slow",
]

PROMOTIONAL_WORDS: List[str] = [
    "buy",
    "purchase",
    "deal",
    "offer",
    "sale",
    "discount",
    "limited",
    "now",
    "today",
]

SPAM_PHRASES: List[str] = [
    "click here",
    "download now",
    "limited time",
    "free gift",
    "promo code",
    "coupon",
    "http://",
    "https://",
    "bit.ly",
    "www.",
]

# ── Linguistic signals (nlp detector) ──────────────────────────────────────

GPT_PHRASE_PATTERNS: List[str] = [
    r"as an? (ai|bot|user|customer)\b",
    r"\bi (recently|highly) recommend",
    r"this app (truly|really|definitely) (stands out|exceeds)",
    r"the (interface|design|experience) is (intuitive|seamless|user-friendly)",
    r"overall,? i('m| am) (impressed|satisfied|pleased)",
    r"\bin conclusion\b",
    r"highly recommended? for (anyone|everyone)",
]

TEMPLATE_PHRASES: List[str] = [
    "great app",
    "highly recommend",
    "easy to use",
    "must have",
    "works perfectly",
    "love it",
    "5 stars",
    "best app ever",
]

GENERIC_PHRASES: List[str] = [
    "user-friendly interface",
    "seamless experience",
    "highly intuitive",
    "game-changer",
    "exceeded my expectations",
    "worth every penny",
    "cannot recommend enough",
]

# Concrete details that generated or paid reviews tend to lack
SPECIFICITY_PATTERNS: List[str] = [
    r"\bv(ersion)?\s?\d+(\.\d+)*",
    r"\$\d+",
    r"\b\d+ (day|days|week|weeks|month|months|year|years|hours)\b",
    r"\b(my|i) (tried|used|tested) (it|this) (for|on)\b",
    r"\bwhen i (first|initially)\b",
    r"\b(android|ios|iphone|pixel|samsung|ipad)\b",
]

# ── Transformer fallback (bertTransformer) ─────────────────────────────────

FORMAL_PATTERNS: List[str] = [
    r"as an? (ai|bot|language model)",
    r"i (would|must) (highly|strongly) recommend",
    r"this (product|app|service) truly exceeds expectations",
    r"in (summary|conclusion), (i|this)",
    r"(furthermore|moreover|additionally), (it|this)",
    r"exhibit(s)? (excellent|exceptional|outstanding)",
]

TEMPLATE_OPENING_PATTERNS: List[str] = [
    r"^i (recently|just) (purchased|bought|downloaded|tried)",
    r"i (would|will|must) definitely recommend",
    r"(highly|strongly) (recommend|suggest) this",
    r"(overall|in conclusion), (this|it) is (a )?(great|excellent|amazing)",
]

# ── SVM approximation (sayamML) ────────────────────────────────────────────

FAKE_INDICATORS: Dict[str, List[str]] = {
    "generic": ["great app", "amazing", "must have", "best ever", "love it"],
    "overpraising": ["absolutely", "definitely", "totally", "incredible", "perfect"],
    "urgency": ["download now", "get it now", "limited time", "hurry"],
    "vague": ["very good", "nice app", "cool app", "good stuff", "works well"],
    "promotional": ["check out", "visit", "link in bio", "promo code", "discount"],
}

# Feature weights approximating the SVM decision boundary
SVM_FEATURE_WEIGHTS: Dict[str, float] = {
    "generic": 0.30,
    "length": 0.15,
    "vocabulary": 0.25,
    "pattern": 0.20,
    "tfidf": 0.10,
}

# ── Sentiment lexicon (developer306 fallback) ──────────────────────────────

# AFINN-style valence scores in [-5, 5]
SENTIMENT_LEXICON: Dict[str, int] = {
    "amazing": 4,
    "awesome": 4,
    "best": 3,
    "brilliant": 4,
    "excellent": 3,
    "fantastic": 4,
    "good": 3,
    "great": 3,
    "happy": 3,
    "incredible": 4,
    "love": 3,
    "nice": 3,
    "outstanding": 5,
    "perfect": 3,
    "recommend": 2,
    "superb": 5,
    "useful": 2,
    "wonderful": 4,
    "works": 1,
    "annoying": -2,
    "awful": -3,
    "bad": -3,
    "broken": -1,
    "bug": -2,
    "crash": -2,
    "crashes": -2,
    "disappointed": -2,
    "disappointing": -2,
    "drain": -1,
    "fail": -2,
    "fails": -2,
    "hate": -3,
    "horrible": -3,
    "issue": -1,
    "poor": -2,
    "problem": -2,
    "scam": -2,
    "slow": -2,
    "terrible": -3,
    "useless": -2,
    "waste": -1,
    "worst": -3,
}

# ── Misinformation patterns (checkup fallback) ─────────────────────────────

# (pattern, weight, category)
MISINFORMATION_PATTERNS: List[Tuple[str, int, str]] = [
    (r"(miracle|magical) (cure|solution|remedy)", 40, "Health"),
    (r"cures? (cancer|diabetes|covid|aids)", 50, "Health"),
    (r"(guaranteed|100%) (weight loss|cure|results)", 35, "Health"),
    (r"(make|earn) \$\d+ (per|a) (day|hour|week)", 45, "Financial"),
    (r"(guaranteed|risk-free) (profits|returns|income)", 40, "Financial"),
    (r"work from home .{0,30}(make|earn) .{0,20}\$\d+", 35, "Financial"),
    (r"(collect|harvest|sell) (your|user) (data|information|personal)", 30, "Privacy"),
    (r"(track|monitor) (you|users) (24/7|constantly|always)", 25, "Privacy"),
    (r"(limited time|act now|expires? soon|hurry|last chance)", 20, "Urgency"),
    (r"only \d+ (left|remaining|available)", 25, "Urgency"),
    (r"(this|one) (weird|simple|secret) (trick|tip|method)", 30, "Deceptive"),
    (r"(doctor|scientist|expert)s? (hate|don't want you to know)", 35, "Deceptive"),
    (r"(government|fbi|cia) (hiding|covering up|doesn't want)", 40, "Conspiracy"),
    (r"big (pharma|tech|oil) (hiding|suppressing)", 35, "Conspiracy"),
]

# ── Claim extraction (cofacts) ─────────────────────────────────────────────

CLAIM_PATTERNS: List[str] = [
    r"\b(cure|treat|prevent|eliminate|guarantee|proven|certified|official|endorsed)\b",
    r"\b(best|top|fastest|easiest|most powerful)\b|#1",
    r"\b(save|earn|make|lose|gain) \$?\d+",
    r"\b(trusted by|used by) \d+ (million|thousand|users|people)",
]

# ── Media checks (kitware fallback) ────────────────────────────────────────

STOCK_PHOTO_HOSTS: List[str] = [
    "shutterstock",
    "gettyimages",
    "istockphoto",
    "depositphotos",
    "dreamstime",
    "adobestock",
]

EDITING_SOFTWARE_MARKERS: List[str] = [
    "photoshop",
    "gimp",
    "lightroom",
    "snapseed",
    "instagram",
]

__all__ = [
    "AI_SELF_REFERENCE_PATTERNS",
    "SUPERLATIVE_WORDS",
    "NEGATIVE_WORDS",
    "PROMOTIONAL_WORDS",
    "SPAM_PHRASES",
    "GPT_PHRASE_PATTERNS",
    "TEMPLATE_PHRASES",
    "GENERIC_PHRASES",
    "SPECIFICITY_PATTERNS",
    "FORMAL_PATTERNS",
    "TEMPLATE_OPENING_PATTERNS",
    "FAKE_INDICATORS",
    "SVM_FEATURE_WEIGHTS",
    "SENTIMENT_LEXICON",
    "MISINFORMATION_PATTERNS",
    "CLAIM_PATTERNS",
    "STOCK_PHOTO_HOSTS",
    "EDITING_SOFTWARE_MARKERS",
]
