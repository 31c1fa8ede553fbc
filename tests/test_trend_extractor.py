"""
Trend extraction over the recent window.
"""
import pytest
from conftest import CURRENT_YEAR, make_record
from pyq_trends.core.config import settings
from pyq_trends.models.question import PYQFilter
from pyq_trends.services.question_store import InMemoryQuestionStore
from pyq_trends.services.trend_extractor import extract_trends, top_entries
from pyq_trends.utils.exceptions import InvalidFilterError, StoreError
from collections import Counter


@pytest.mark.asyncio
async def test_window_excludes_old_records_and_keeps_first_seen_ties(store):
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)

    assert trends.top_topics == ["Environment", "Polity"]
    assert trends.year_distribution == {2024: 1, 2023: 1, 2022: 1, 2021: 1}
    assert trends.sample_size_used == 4
    assert (trends.from_year, trends.to_year) == (2019, 2024)


@pytest.mark.asyncio
async def test_keywords_sorted_by_count(store):
    trends = await extract_trends(store, PYQFilter(exam_code="upsc"), 5, 500, current_year=CURRENT_YEAR)
    assert trends.top_keywords == ["federalism", "climate change", "biodiversity"]
    assert trends.keyword_frequency["federalism"] == 2


@pytest.mark.asyncio
async def test_higher_frequency_wins_over_recency():
    store = InMemoryQuestionStore([
        make_record("a", 2024, ["Economy"]),
        make_record("b", 2022, ["Polity"]),
        make_record("c", 2021, ["Polity"]),
    ])
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)
    assert trends.top_topics == ["Polity", "Economy"]


@pytest.mark.asyncio
async def test_sample_size_caps_most_recent_first(store):
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 2, current_year=CURRENT_YEAR)
    assert trends.sample_size_used == 2
    assert trends.top_topics == ["Environment"]
    assert trends.year_distribution == {2024: 1, 2023: 1}


@pytest.mark.asyncio
async def test_top_lists_are_truncated():
    records = [make_record(f"q{i}", 2024, [f"topic-{i}"], [f"kw-{i}"]) for i in range(20)]
    store = InMemoryQuestionStore(records)
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)
    assert len(trends.top_topics) == 10
    assert len(trends.top_keywords) == 15
    assert trends.top_topics[0] == "topic-0"


@pytest.mark.asyncio
async def test_no_matches_is_empty_not_error(store):
    trends = await extract_trends(store, PYQFilter(exam_code="SSC"), 5, 500, current_year=CURRENT_YEAR)
    assert trends.top_topics == []
    assert trends.top_keywords == []
    assert trends.year_distribution == {}
    assert trends.sample_size_used == 0
    assert trends.is_empty


@pytest.mark.asyncio
async def test_invalid_window_falls_back_to_default(store):
    for window in (None, 0, -3, "abc"):
        trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), window, None, current_year=CURRENT_YEAR)
        assert trends.from_year == 2019


@pytest.mark.asyncio
async def test_wider_window_includes_older_records(store):
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 10, 500, current_year=CURRENT_YEAR)
    assert trends.year_distribution[2015] == 1
    assert trends.topic_frequency["Environment"] == 3


@pytest.mark.asyncio
async def test_invalid_records_are_not_tallied():
    store = InMemoryQuestionStore([
        make_record("ok", 2024, ["Economy"]),
        make_record("short", 2024, ["Noise"], question="tiny"),
    ])
    trends = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)
    assert trends.top_topics == ["Economy"]
    assert trends.sample_size_used == 1


@pytest.mark.asyncio
async def test_level_and_paper_filters():
    store = InMemoryQuestionStore([
        make_record("gs2", 2024, ["Polity"], paper="GS-2"),
        make_record("gs3", 2024, ["Economy"], paper="GS-3"),
        make_record("pre", 2024, ["Geography"], level="Prelims", paper="GS-1"),
    ])
    trends = await extract_trends(
        store, PYQFilter(exam_code="UPSC", level="Mains", paper="gs-3"), 5, 500, current_year=CURRENT_YEAR
    )
    assert trends.top_topics == ["Economy"]


@pytest.mark.asyncio
async def test_repeated_calls_are_identical(store):
    first = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)
    second = await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)
    assert first == second


@pytest.mark.asyncio
async def test_store_failure_propagates(failing_store):
    with pytest.raises(StoreError):
        await extract_trends(failing_store, PYQFilter(exam_code="UPSC"), 5, 500, current_year=CURRENT_YEAR)


def test_missing_exam_code_is_rejected():
    with pytest.raises(InvalidFilterError):
        PYQFilter(exam_code="  ")


def test_top_entries_is_stable():
    counter = Counter()
    for label in ["b", "a", "c", "a", "b"]:
        counter[label] += 1
    assert top_entries(counter, 10) == ["b", "a", "c"]
    assert top_entries(counter, 1) == ["b"]


class RecordingStore(InMemoryQuestionStore):
    def __init__(self, records=None):
        super().__init__(records)
        self.limits = []

    async def find(self, query, sort, limit):
        self.limits.append(limit)
        return await super().find(query, sort, limit)


@pytest.mark.asyncio
async def test_sample_size_is_capped_by_configured_maximum():
    store = RecordingStore([make_record("a", 2024, ["Economy"])])
    await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 10_000_000, current_year=CURRENT_YEAR)
    await extract_trends(store, PYQFilter(exam_code="UPSC"), 5, 50, current_year=CURRENT_YEAR)
    assert store.limits == [settings.max_trend_sample_size, 50]
