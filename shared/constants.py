"""Read-only keyword tables used for classification and breaking-news scoring."""
from types import MappingProxyType


# Weighted terms for the breaking-news keyword component.
BREAKING_KEYWORD_WEIGHTS = MappingProxyType({
    "breaking": 30,
    "urgent": 25,
    "just in": 25,
    "developing": 20,
    "exclusive": 15,
    "alert": 20,
    "emergency": 25,
    "crisis": 15,
    "killed": 15,
    "attack": 15,
    "explosion": 20,
    "earthquake": 20,
    "tsunami": 25,
    "war": 15,
    "invasion": 20,
})

MAX_BREAKING_SCORE = 100

# (max age in minutes, bonus), checked in order
RECENCY_BONUSES = (
    (30, 15),
    (60, 10),
    (180, 5),
)

SOURCE_TIER_BONUSES = MappingProxyType({
    1: 10,
    2: 5,
})

# Iteration order decides ties between equally scored categories.
CATEGORY_KEYWORDS = MappingProxyType({
    "technology": (
        "tech", "software", "hardware", "ai", "artificial intelligence",
        "machine learning", "startup", "app", "cyber", "digital", "silicon valley",
        "programming", "algorithm", "cloud computing", "blockchain", "crypto",
        "robot", "automation", "gadget", "smartphone",
    ),
    "business": (
        "stock", "market", "economy", "gdp", "trade", "investment", "finance",
        "bank", "revenue", "profit", "merger", "acquisition", "ipo", "startup",
        "entrepreneur", "corporation", "inflation", "recession",
    ),
    "politics": (
        "election", "president", "congress", "senate", "parliament", "democrat",
        "republican", "vote", "legislation", "policy", "governor", "mayor",
        "diplomat", "sanction", "government", "political", "campaign",
    ),
    "science": (
        "research", "study", "scientist", "nasa", "space", "discovery",
        "experiment", "physics", "biology", "chemistry", "genome", "climate",
        "fossil", "evolution", "quantum", "laboratory",
    ),
    "sports": (
        "football", "soccer", "basketball", "tennis", "olympics", "championship",
        "tournament", "league", "nba", "nfl", "fifa", "goal", "match", "coach",
        "athlete", "medal", "cricket", "rugby",
    ),
    "health": (
        "health", "medical", "hospital", "vaccine", "disease", "pandemic",
        "doctor", "treatment", "surgery", "mental health", "cancer", "drug",
        "pharmaceutical", "clinical trial", "who", "cdc",
    ),
    "culture": (
        "movie", "film", "music", "art", "book", "museum", "festival",
        "theater", "celebrity", "fashion", "entertainment", "oscar", "grammy",
        "exhibition", "concert", "streaming",
    ),
})

MIN_CATEGORY_KEYWORD_HITS = 2

# Category catalogue seeded at worker startup: (slug, display name)
DEFAULT_CATEGORIES = (
    ("top-stories", "Top Stories"),
    ("world", "World"),
    ("business", "Business"),
    ("technology", "Technology"),
    ("politics", "Politics"),
    ("science", "Science"),
    ("culture", "Culture"),
    ("sports", "Sports"),
    ("health", "Health"),
)
