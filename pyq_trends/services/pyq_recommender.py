"""
PYQ recommendation pipeline orchestrator.
Coordinates the two-phase flow:
1. Trend extraction over the recent window
2. Relevance ranking of questions matching the discovered trends
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.data.sample_questions import SAMPLE_QUESTIONS, SAMPLE_REASON
from pyq_trends.models.question import PYQFilter, PYQRecord
from pyq_trends.services.question_store import QuestionStore
from pyq_trends.services.relevance_ranker import ScoredCandidate, rank_candidates
from pyq_trends.services.trend_extractor import TrendSummary, extract_trends


# Trend lists are shortened in the response payload
RESPONSE_TOPICS = 5
RESPONSE_KEYWORDS = 8
DEFAULT_RECOMMENDATION_REASON = "High relevance score"


@dataclass
class MostProbableResult:
    """Ranked questions together with the trends that produced them."""

    questions: List[ScoredCandidate] = field(default_factory=list)
    trends: TrendSummary = field(default_factory=TrendSummary)

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "questions": [candidate.to_dict() for candidate in self.questions],
            "trends": {
                "topTopics": self.trends.top_topics[:RESPONSE_TOPICS],
                "topKeywords": self.trends.top_keywords[:RESPONSE_KEYWORDS],
                "yearDistribution": self.trends.year_distribution,
                "totalAnalyzed": self.trends.sample_size_used,
            },
            "count": len(self.questions),
        }


def clamp_limit(limit: Optional[int], default: int, maximum: int) -> int:
    """Apply the default for a missing limit and cap it at maximum. Non-positive stays as is."""
    if limit is None:
        return default
    return min(limit, maximum)


async def find_most_probable(
    store: QuestionStore,
    pyq_filter: PYQFilter,
    limit: Optional[int] = None,
    year_range: Optional[int] = None,
    current_year: Optional[int] = None
) -> MostProbableResult:
    """
    Run trend extraction then ranking for one request.

    Args:
        store: Question store to query
        pyq_filter: Exam/level/paper/subject filter
        limit: Number of questions wanted (default from settings)
        year_range: Trend window in years (default from settings)
        current_year: Reference year (default: this calendar year)

    Returns:
        MostProbableResult with ranked questions and trend summary

    Raises:
        StoreError: If either store query fails
    """
    current_year = current_year or datetime.now().year
    limit = clamp_limit(limit, settings.default_results_limit, settings.max_results_limit)

    logger.info(f"[Recommender] Most-probable request: exam={pyq_filter.exam_code} limit={limit}")

    trends = await extract_trends(
        store,
        pyq_filter,
        window_years=year_range,
        max_sample_size=settings.trend_sample_size,
        current_year=current_year
    )
    questions = await rank_candidates(
        store,
        pyq_filter,
        trends,
        subject=pyq_filter.subject,
        limit_requested=limit,
        current_year=current_year
    )
    return MostProbableResult(questions=questions, trends=trends)


def sample_padding(exam_code: str, exclude_questions: List[str], needed: int) -> List[Dict[str, Any]]:
    """
    Static sample questions to fill a short recommendation list.
    Samples for the requested exam come first; question texts already present are skipped.
    """
    if needed <= 0:
        return []

    samples = [PYQRecord.model_validate(item) for item in SAMPLE_QUESTIONS]
    samples.sort(key=lambda record: record.exam_code != exam_code)

    seen = {text.lower() for text in exclude_questions}
    padding = []
    for record in samples:
        if len(padding) >= needed:
            break
        if record.question_text.lower() in seen:
            continue
        seen.add(record.question_text.lower())
        item = record.to_api_dict()
        item["recommendationReason"] = SAMPLE_REASON
        item["isSample"] = True
        padding.append(item)
    return padding


async def get_recommendations(
    store: QuestionStore,
    pyq_filter: PYQFilter,
    limit: Optional[int] = None,
    current_year: Optional[int] = None
) -> Dict[str, Any]:
    """
    Fixed-size list of recommended questions with a reason per item.
    Pads with static samples when ranking yields fewer than requested.

    Returns:
        Dict with recommendations, count and padded flag
    """
    limit = clamp_limit(limit, settings.recommendations_limit, settings.max_results_limit)
    if limit <= 0:
        return {"success": True, "recommendations": [], "count": 0, "padded": False}

    result = await find_most_probable(store, pyq_filter, limit=limit, current_year=current_year)

    recommendations = []
    for candidate in result.questions:
        item = candidate.to_dict()
        item["recommendationReason"] = (
            candidate.trend_reasons[0] if candidate.trend_reasons else DEFAULT_RECOMMENDATION_REASON
        )
        item["isSample"] = False
        recommendations.append(item)

    padding = sample_padding(
        pyq_filter.exam_code,
        [candidate.record.question_text for candidate in result.questions],
        limit - len(recommendations)
    )
    if padding:
        logger.info(f"[Recommender] Padding {len(recommendations)} recommendations with {len(padding)} samples")
    recommendations.extend(padding)

    return {
        "success": True,
        "recommendations": recommendations,
        "count": len(recommendations),
        "padded": bool(padding),
    }
