"""
Relevance ranking of candidate questions against extracted trends.

Scoring is additive and hand-tuned. Each term is clamped to its own cap before
summation so the total never exceeds 120:

    recency   max(0, 30 - 2 * years_ago)      cap 30
    topic     5 per trending topic tag         cap 25
    keyword   3 per trending keyword           cap 20
    analysis  15 when analysis text exists     cap 15
    verified  10 for verified / gov sources    cap 10
    subject   20 when subject text matches     cap 20
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.models.question import GOV_DOMAIN_MARKERS, PYQFilter, PYQRecord
from pyq_trends.services.question_store import CANDIDATE_SORT, QuestionQuery, QuestionStore
from pyq_trends.services.trend_extractor import TrendSummary


RECENCY_CAP = 30
TOPIC_CAP = 25
KEYWORD_CAP = 20
ANALYSIS_CAP = 15
VERIFIED_CAP = 10
SUBJECT_CAP = 20
MAX_SCORE = RECENCY_CAP + TOPIC_CAP + KEYWORD_CAP + ANALYSIS_CAP + VERIFIED_CAP + SUBJECT_CAP

RECENCY_DECAY_PER_YEAR = 2
POINTS_PER_TOPIC = 5
POINTS_PER_KEYWORD = 3
RECENT_YEARS = 2
MAX_KEYWORD_REASONS = 2


def _clamp(value: int, cap: int) -> int:
    return max(0, min(cap, value))


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-signal contributions to a relevance score."""

    recency: int = 0
    topic: int = 0
    keyword: int = 0
    analysis: int = 0
    verified: int = 0
    subject: int = 0

    @property
    def total(self) -> int:
        return self.recency + self.topic + self.keyword + self.analysis + self.verified + self.subject

    def to_dict(self) -> Dict[str, int]:
        return {
            "recency": self.recency,
            "topic": self.topic,
            "keyword": self.keyword,
            "analysis": self.analysis,
            "verified": self.verified,
            "subject": self.subject,
        }


@dataclass
class ScoredCandidate:
    """A question with its relevance score and advisory reasons."""

    record: PYQRecord
    breakdown: ScoreBreakdown
    trend_reasons: List[str] = field(default_factory=list)

    @property
    def relevance_score(self) -> int:
        return self.breakdown.total

    def to_dict(self) -> Dict[str, Any]:
        payload = self.record.to_api_dict()
        payload["relevanceScore"] = self.relevance_score
        payload["scoreBreakdown"] = self.breakdown.to_dict()
        payload["trendReasons"] = list(self.trend_reasons)
        return payload


def score_question(
    record: PYQRecord,
    top_topics: Sequence[str],
    top_keywords: Sequence[str],
    subject: str = "",
    current_year: Optional[int] = None,
    gov_markers: Sequence[str] = GOV_DOMAIN_MARKERS
) -> ScoreBreakdown:
    """
    Score one record against the trending topics and keywords.

    Invalid records (year out of range, question too short) score zero.
    """
    current_year = current_year or datetime.now().year
    if not record.is_valid(current_year):
        return ScoreBreakdown()

    topics = set(top_topics)
    keywords = set(top_keywords)

    years_ago = current_year - record.year
    recency = _clamp(RECENCY_CAP - RECENCY_DECAY_PER_YEAR * years_ago, RECENCY_CAP)

    matching_topics = sum(1 for tag in record.topic_tags if tag in topics)
    matching_keywords = sum(1 for kw in record.keywords if kw in keywords)

    subject_points = 0
    if subject:
        needle = subject.lower()
        joined_tags = " ".join(record.topic_tags).lower()
        if needle in record.question_text.lower() or needle in joined_tags:
            subject_points = SUBJECT_CAP

    return ScoreBreakdown(
        recency=recency,
        topic=_clamp(POINTS_PER_TOPIC * matching_topics, TOPIC_CAP),
        keyword=_clamp(POINTS_PER_KEYWORD * matching_keywords, KEYWORD_CAP),
        analysis=ANALYSIS_CAP if record.has_analysis() else 0,
        verified=VERIFIED_CAP if record.is_verified(gov_markers) else 0,
        subject=subject_points
    )


def build_trend_reasons(
    record: PYQRecord,
    top_topics: Sequence[str],
    top_keywords: Sequence[str],
    current_year: Optional[int] = None
) -> List[str]:
    """Human-readable reasons for recommending a record. Not used in scoring."""
    current_year = current_year or datetime.now().year
    topics = set(top_topics)
    keywords = set(top_keywords)

    reasons = [f"Trending topic: {tag}" for tag in record.topic_tags if tag in topics]
    matched_keywords = [kw for kw in record.keywords if kw in keywords]
    reasons.extend(f"Important keyword: {kw}" for kw in matched_keywords[:MAX_KEYWORD_REASONS])
    if record.year >= current_year - RECENT_YEARS:
        reasons.append("Recent question")
    if record.has_analysis():
        reasons.append("Has detailed analysis")
    return reasons


async def rank_candidates(
    store: QuestionStore,
    pyq_filter: PYQFilter,
    trends: TrendSummary,
    subject: Optional[str] = None,
    limit_requested: int = 20,
    current_year: Optional[int] = None
) -> List[ScoredCandidate]:
    """
    Retrieve and rank questions matching the discovered trends.

    Args:
        store: Question store to query
        pyq_filter: Same filter used for trend extraction
        trends: Output of extract_trends
        subject: Optional free-text subject (falls back to pyq_filter.subject)
        limit_requested: Number of results wanted; <= 0 yields no results
        current_year: Reference year (default: this calendar year)

    Returns:
        Up to limit_requested candidates, highest relevance first

    Raises:
        StoreError: If the store query fails
    """
    if limit_requested <= 0:
        return []

    current_year = current_year or datetime.now().year
    subject = (subject if subject is not None else pyq_filter.subject).strip()

    query = QuestionQuery(
        exam_code=pyq_filter.exam_code,
        level=pyq_filter.level,
        paper=pyq_filter.paper,
        from_year=trends.from_year or None,
        to_year=trends.to_year or None,
        topics_any=trends.top_topics,
        keywords_any=trends.top_keywords,
        subject_pattern=subject
    )
    if not query.has_trend_clause:
        logger.info("[Ranker] No trends or subject to match, returning empty ranking")
        return []

    # Over-fetch so weighting picks the true top-N rather than storage order
    pool = await store.find(query, sort=CANDIDATE_SORT, limit=limit_requested * 2)

    scored = []
    for record in pool:
        if not record.is_valid(current_year):
            logger.warning(f"[Ranker] Excluding invalid record {record.id or '?'} from ranking")
            continue
        breakdown = score_question(
            record,
            trends.top_topics,
            trends.top_keywords,
            subject=subject,
            current_year=current_year,
            gov_markers=settings.gov_domain_markers
        )
        scored.append(ScoredCandidate(record=record, breakdown=breakdown))

    # Stable: equal scores keep candidate pool order (verified, then newest)
    scored.sort(key=lambda candidate: candidate.relevance_score, reverse=True)
    top = scored[:limit_requested]

    for candidate in top:
        candidate.trend_reasons = build_trend_reasons(
            candidate.record, trends.top_topics, trends.top_keywords, current_year
        )

    logger.info(f"[Ranker] Ranked {len(scored)} candidates from pool of {len(pool)}, returning {len(top)}")
    return top
