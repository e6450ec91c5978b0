"""Breaking-news scoring for raw articles."""
from datetime import datetime
from typing import Optional

from api.models.article import RawArticle
from api.models.source import SourceModel
from shared.constants import (
    BREAKING_KEYWORD_WEIGHTS,
    MAX_BREAKING_SCORE,
    RECENCY_BONUSES,
    SOURCE_TIER_BONUSES,
)
from shared.utils import ensure_utc, get_utc_now


def calculate_breaking_score(
    raw: RawArticle,
    source: SourceModel,
    now: Optional[datetime] = None
) -> int:
    """
    Calculate a breaking-news score between 0 and 100.

    The score is the sum of three components, capped at 100:

    1. Keywords: a weighted term in the title earns its full weight; found
       only in the summary it earns half (rounded down). Each term counts once.
    2. Recency: +15 under 30 minutes old, +10 under an hour, +5 under three
       hours. Future timestamps count as brand new.
    3. Source tier: +10 for tier 1, +5 for tier 2.

    Pass ``now`` to make the recency component reproducible.
    """
    score = (
        keyword_score(raw.title, raw.summary)
        + recency_bonus(raw.published_at, now)
        + source_tier_bonus(source)
    )
    return max(0, min(score, MAX_BREAKING_SCORE))


def keyword_score(title: str, summary: Optional[str]) -> int:
    title_lower = title.lower()
    summary_lower = (summary or "").lower()
    score = 0

    for keyword, weight in BREAKING_KEYWORD_WEIGHTS.items():
        if keyword in title_lower:
            score += weight
        elif keyword in summary_lower:
            score += weight // 2

    return score


def recency_bonus(published_at: Optional[datetime], now: Optional[datetime] = None) -> int:
    if published_at is None:
        return 0

    now = ensure_utc(now) if now else get_utc_now()
    age_minutes = (now - ensure_utc(published_at)).total_seconds() / 60

    if age_minutes < 0:
        return RECENCY_BONUSES[0][1]

    for max_age, bonus in RECENCY_BONUSES:
        if age_minutes < max_age:
            return bonus
    return 0


def source_tier_bonus(source: SourceModel) -> int:
    return SOURCE_TIER_BONUSES.get(source.config.tier, 0)
