"""
Trend extraction over a recent window of previous year questions.
Counts topic tags, keywords and years across a bounded, recency-ordered sample.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.models.question import PYQFilter
from pyq_trends.services.question_store import QuestionQuery, QuestionStore, TREND_SORT


@dataclass
class TrendSummary:
    """Frequency tables built from one trend window."""

    top_topics: List[str] = field(default_factory=list)
    top_keywords: List[str] = field(default_factory=list)
    year_distribution: Dict[int, int] = field(default_factory=dict)
    sample_size_used: int = 0
    from_year: int = 0
    to_year: int = 0
    topic_frequency: Dict[str, int] = field(default_factory=dict)
    keyword_frequency: Dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.top_topics or self.top_keywords)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topTopics": self.top_topics,
            "topKeywords": self.top_keywords,
            "yearDistribution": self.year_distribution,
            "sampleSizeUsed": self.sample_size_used,
            "fromYear": self.from_year,
            "toYear": self.to_year,
            "topicFrequency": self.topic_frequency,
            "keywordFrequency": self.keyword_frequency,
        }


def coerce_positive_int(value: Any, default: int) -> int:
    """Return value as a positive int, or default when absent or unusable."""
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def top_entries(counter: Counter, limit: int) -> List[str]:
    """
    Keys of the counter ordered by count descending.
    Equal counts keep first-seen order since sorted() is stable.
    """
    ranked = sorted(counter.items(), key=lambda item: item[1], reverse=True)
    return [key for key, _ in ranked[:limit]]


async def extract_trends(
    store: QuestionStore,
    pyq_filter: PYQFilter,
    window_years: Any = None,
    max_sample_size: Any = None,
    current_year: Optional[int] = None
) -> TrendSummary:
    """
    Compute topic, keyword and year frequency over the recent window.

    Args:
        store: Question store to query
        pyq_filter: Exam/level/paper filter
        window_years: Years to look back (default from settings)
        max_sample_size: Cap on records pulled (default from settings, bounded by max_trend_sample_size)
        current_year: Reference year (default: this calendar year)

    Returns:
        TrendSummary with top topics/keywords and the year histogram

    Raises:
        StoreError: If the store query fails
    """
    current_year = current_year or datetime.now().year
    window_years = coerce_positive_int(window_years, settings.trend_window_years)
    max_sample_size = min(
        coerce_positive_int(max_sample_size, settings.trend_sample_size),
        settings.max_trend_sample_size
    )
    from_year = current_year - window_years

    query = QuestionQuery(
        exam_code=pyq_filter.exam_code,
        level=pyq_filter.level,
        paper=pyq_filter.paper,
        from_year=from_year,
        to_year=current_year
    )

    logger.info(
        f"[TrendExtractor] exam={pyq_filter.exam_code} level={pyq_filter.level or '-'} "
        f"paper={pyq_filter.paper or '-'} window={from_year}-{current_year} cap={max_sample_size}"
    )

    records = await store.find(query, sort=TREND_SORT, limit=max_sample_size)

    topic_counts: Counter = Counter()
    keyword_counts: Counter = Counter()
    year_counts: Counter = Counter()
    sampled = 0

    for record in records:
        if not record.is_valid(current_year):
            logger.warning(f"[TrendExtractor] Skipping invalid record {record.id or '?'} (year={record.year})")
            continue
        sampled += 1
        for tag in record.topic_tags:
            topic_counts[tag] += 1
        for keyword in record.keywords:
            keyword_counts[keyword] += 1
        year_counts[record.year] += 1

    summary = TrendSummary(
        top_topics=top_entries(topic_counts, settings.top_topics_limit),
        top_keywords=top_entries(keyword_counts, settings.top_keywords_limit),
        year_distribution=dict(year_counts),
        sample_size_used=sampled,
        from_year=from_year,
        to_year=current_year,
        topic_frequency=dict(topic_counts),
        keyword_frequency=dict(keyword_counts)
    )

    logger.info(
        f"[TrendExtractor] Analyzed {sampled} records: "
        f"{len(summary.top_topics)} topics, {len(summary.top_keywords)} keywords"
    )
    return summary
