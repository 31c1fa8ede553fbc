"""
Shared fixtures: an in-memory question corpus anchored at a fixed current year.
"""
import pytest
from pyq_trends.models.question import PYQRecord
from pyq_trends.services.question_store import InMemoryQuestionStore, QuestionStore
from pyq_trends.utils.exceptions import StoreError


CURRENT_YEAR = 2024


def make_record(record_id, year, tags=(), keywords=(), **overrides):
    data = {
        "_id": record_id,
        "exam": "UPSC",
        "level": "Mains",
        "paper": "GS-2",
        "year": year,
        "question": f"Sample question {record_id} for practice and revision.",
        "topicTags": list(tags),
        "keywords": list(keywords),
    }
    data.update(overrides)
    return PYQRecord.model_validate(data)


class FailingStore(QuestionStore):
    """Store whose every query fails, as a dropped connection would."""

    async def find(self, query, sort, limit):
        raise StoreError("connection refused")

    async def insert_many(self, records):
        raise StoreError("connection refused")


@pytest.fixture
def corpus():
    return [
        make_record(
            "env-2024", 2024, ["Environment"], ["climate change"],
            verified=True, analysis="Detailed model answer"
        ),
        make_record("env-2023", 2023, ["Environment"], ["biodiversity"]),
        make_record("env-2015", 2015, ["Environment"], ["climate change"]),
        make_record(
            "pol-2022", 2022, ["Polity"], ["federalism"],
            question="Examine the federal structure of the Indian Constitution.",
            sourceLink="https://upsc.gov.in/papers/2022"
        ),
        make_record(
            "pol-2021", 2021, ["Polity"], ["federalism"],
            question="Discuss the role of Governors in a federal polity."
        ),
    ]


@pytest.fixture
def store(corpus):
    return InMemoryQuestionStore(corpus)


@pytest.fixture
def failing_store():
    return FailingStore()
