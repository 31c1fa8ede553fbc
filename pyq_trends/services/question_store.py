"""
Question store access.
Wraps the PYQ document collection behind a small query interface so that
trend extraction and ranking never touch the driver directly.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import BulkWriteError, PyMongoError
from pydantic import ValidationError
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.models.question import PYQRecord
from pyq_trends.utils.exceptions import StoreError


SortSpec = List[Tuple[str, int]]

# Newest first, verified first within a year
TREND_SORT: SortSpec = [("year", -1), ("verified", -1)]
# Verified first, newest first within verification status
CANDIDATE_SORT: SortSpec = [("verified", -1), ("year", -1)]


@dataclass
class QuestionQuery:
    """
    Filter over the question collection.

    Base clauses (exam, level, paper, year range) are AND-ed. The trend clauses
    (topics_any, keywords_any, subject_pattern) are OR-ed together and only
    applied when at least one of them is set.
    """

    exam_code: str
    level: str = ""
    paper: str = ""
    from_year: Optional[int] = None
    to_year: Optional[int] = None
    topics_any: Sequence[str] = field(default_factory=list)
    keywords_any: Sequence[str] = field(default_factory=list)
    subject_pattern: str = ""

    @property
    def has_trend_clause(self) -> bool:
        return bool(self.topics_any or self.keywords_any or self.subject_pattern)


def build_mongo_filter(query: QuestionQuery) -> Dict[str, Any]:
    """
    Translate a QuestionQuery into a MongoDB filter document.

    Args:
        query: QuestionQuery to translate

    Returns:
        Dict usable with collection.find()
    """
    mongo_filter: Dict[str, Any] = {"exam": query.exam_code}

    if query.level:
        mongo_filter["level"] = query.level
    if query.paper:
        mongo_filter["paper"] = {"$regex": re.escape(query.paper), "$options": "i"}

    year_bounds = {}
    if query.from_year is not None:
        year_bounds["$gte"] = query.from_year
    if query.to_year is not None:
        year_bounds["$lte"] = query.to_year
    if year_bounds:
        mongo_filter["year"] = year_bounds

    if query.has_trend_clause:
        clauses: List[Dict[str, Any]] = []
        if query.topics_any:
            clauses.append({"topicTags": {"$in": list(query.topics_any)}})
            clauses.append({"theme": {"$in": list(query.topics_any)}})
        if query.keywords_any:
            clauses.append({"keywords": {"$in": list(query.keywords_any)}})
        if query.subject_pattern:
            pattern = re.escape(query.subject_pattern)
            clauses.append({"topicTags": {"$regex": pattern, "$options": "i"}})
            clauses.append({"theme": {"$regex": pattern, "$options": "i"}})
        mongo_filter["$or"] = clauses

    return mongo_filter


def matches_query(record: PYQRecord, query: QuestionQuery) -> bool:
    """Evaluate a QuestionQuery against a single record (same semantics as build_mongo_filter)."""
    if record.exam_code != query.exam_code:
        return False
    if query.level and record.level != query.level:
        return False
    if query.paper and query.paper.lower() not in record.paper.lower():
        return False
    if query.from_year is not None and record.year < query.from_year:
        return False
    if query.to_year is not None and record.year > query.to_year:
        return False

    if not query.has_trend_clause:
        return True

    topics = set(query.topics_any)
    keywords = set(query.keywords_any)
    if any(tag in topics for tag in record.topic_tags):
        return True
    if record.theme and record.theme in topics:
        return True
    if any(kw in keywords for kw in record.keywords):
        return True
    if query.subject_pattern:
        needle = query.subject_pattern.lower()
        if any(needle in tag.lower() for tag in record.topic_tags):
            return True
        if needle in record.theme.lower():
            return True
    return False


def _sort_value(record: PYQRecord, field_name: str) -> Any:
    if field_name == "year":
        return record.year
    if field_name == "verified":
        return int(record.verified)
    raise ValueError(f"Unsupported sort field: {field_name}")


class QuestionStore(ABC):
    """Read/insert interface over the PYQ collection."""

    @abstractmethod
    async def find(self, query: QuestionQuery, sort: SortSpec, limit: int) -> List[PYQRecord]:
        """
        Fetch records matching the query.

        Args:
            query: QuestionQuery filter
            sort: List of (field, direction) pairs, direction 1 or -1
            limit: Maximum number of records

        Returns:
            Matching records in sort order

        Raises:
            StoreError: If the underlying query fails
        """
        pass

    @abstractmethod
    async def insert_many(self, records: Sequence[PYQRecord]) -> int:
        """Insert records and return how many were stored."""
        pass


class InMemoryQuestionStore(QuestionStore):
    """Question store kept in process memory. Used for local runs and tests."""

    def __init__(self, records: Optional[Sequence[PYQRecord]] = None):
        self._records: List[PYQRecord] = []
        self._next_id = 1
        if records:
            for record in records:
                self._append(record)

    def _append(self, record: PYQRecord) -> None:
        if not record.id:
            record = record.model_copy(update={"id": f"mem-{self._next_id}"})
        self._next_id += 1
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    async def find(self, query: QuestionQuery, sort: SortSpec, limit: int) -> List[PYQRecord]:
        if limit <= 0:
            return []
        matched = [r for r in self._records if matches_query(r, query)]
        # Stable sorts applied from the least to the most significant key
        for field_name, direction in reversed(sort):
            matched.sort(key=lambda r: _sort_value(r, field_name), reverse=direction < 0)
        return matched[:limit]

    async def insert_many(self, records: Sequence[PYQRecord]) -> int:
        for record in records:
            self._append(record)
        logger.info(f"[QuestionStore] Inserted {len(records)} records into memory store")
        return len(records)


class MongoQuestionStore(QuestionStore):
    """Question store backed by a MongoDB collection via motor."""

    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        timeout_ms: int = 5000
    ):
        self.client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=timeout_ms)
        self.collection = self.client[database][collection]
        logger.info(f"[QuestionStore] Initialized MongoDB store for {database}.{collection}")

    async def find(self, query: QuestionQuery, sort: SortSpec, limit: int) -> List[PYQRecord]:
        if limit <= 0:
            return []

        mongo_filter = build_mongo_filter(query)
        logger.debug(f"[QuestionStore] find filter={mongo_filter} sort={sort} limit={limit}")

        try:
            cursor = self.collection.find(mongo_filter).sort(sort).limit(limit)
            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error(f"[QuestionStore] Query failed: {e}")
            raise StoreError(f"Question store query failed: {e}") from e

        records = []
        for document in documents:
            try:
                records.append(PYQRecord.model_validate(document))
            except ValidationError as e:
                logger.warning(f"[QuestionStore] Skipping malformed document {document.get('_id')}: {e}")
        return records

    async def insert_many(self, records: Sequence[PYQRecord]) -> int:
        if not records:
            return 0

        documents = [record.to_document() for record in records]
        try:
            result = await self.collection.insert_many(documents, ordered=False)
            inserted = len(result.inserted_ids)
        except BulkWriteError as e:
            inserted = e.details.get("nInserted", 0)
            logger.warning(f"[QuestionStore] Partial insert: {inserted}/{len(documents)} stored")
        except PyMongoError as e:
            logger.error(f"[QuestionStore] Insert failed: {e}")
            raise StoreError(f"Question store insert failed: {e}") from e

        logger.info(f"[QuestionStore] Inserted {inserted} records into MongoDB")
        return inserted


def create_question_store() -> QuestionStore:
    """Build the store configured by settings.store_backend."""
    backend = settings.store_backend.lower()
    if backend == "memory":
        logger.info("[QuestionStore] Using in-memory question store")
        return InMemoryQuestionStore()
    if backend == "mongo":
        return MongoQuestionStore(
            uri=settings.mongodb_uri,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
            timeout_ms=settings.mongodb_timeout_ms
        )
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


_question_store: Optional[QuestionStore] = None


def get_question_store() -> QuestionStore:
    """Get the process-wide question store (FastAPI dependency)."""
    global _question_store
    if _question_store is None:
        _question_store = create_question_store()
    return _question_store


def close_question_store() -> None:
    """Release the process-wide store, closing the Mongo client if one was opened."""
    global _question_store
    if isinstance(_question_store, MongoQuestionStore):
        _question_store.client.close()
        logger.info("[QuestionStore] Closed MongoDB client")
    _question_store = None
