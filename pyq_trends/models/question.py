"""
Question record and filter models.
Records mirror the documents in the PYQ collection and are read-only to the core.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pyq_trends.utils.exceptions import InvalidFilterError


MIN_VALID_YEAR = 1990
MIN_QUESTION_LENGTH = 10
GOV_DOMAIN_MARKERS = (".gov.in", ".nic.in")


def _clean_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if hasattr(value, "tolist"):
        value = value.tolist()
    if not isinstance(value, (list, tuple, set)):
        # A bare scalar (e.g. a number) is a single label
        value = [value]
    cleaned = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


class PYQRecord(BaseModel):
    """A previous year question as stored in the question collection."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default="", alias="_id", description="Opaque unique identifier")
    exam_code: str = Field(..., alias="exam", description="Upper-cased exam code, e.g. UPSC")
    level: str = Field(default="", description="Prelims, Mains, Interview or empty")
    paper: str = Field(default="", description="Paper label, e.g. GS-2")
    year: int = Field(default=0, description="Exam year")
    question_text: str = Field(default="", alias="question", description="Question text")
    topic_tags: List[str] = Field(default_factory=list, alias="topicTags")
    keywords: List[str] = Field(default_factory=list)
    theme: str = Field(default="")
    source_link: str = Field(default="", alias="sourceLink")
    verified: bool = Field(default=False)
    analysis: str = Field(default="")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("exam_code", mode="before")
    @classmethod
    def _normalize_exam(cls, value: Any) -> str:
        return str(value or "").strip().upper()

    @field_validator("level", "paper", "question_text", "theme", "source_link", "analysis", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value: Any) -> int:
        # Unparseable years become 0, which is never inside the valid range
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("topic_tags", "keywords", mode="before")
    @classmethod
    def _normalize_labels(cls, value: Any) -> List[str]:
        return _clean_list(value)

    @field_validator("verified", mode="before")
    @classmethod
    def _coerce_verified(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "y")
        return bool(value)

    def is_valid(self, current_year: Optional[int] = None) -> bool:
        """Check year bounds and minimum question length."""
        current_year = current_year or datetime.now().year
        if not MIN_VALID_YEAR <= self.year <= current_year + 1:
            return False
        return len(self.question_text) >= MIN_QUESTION_LENGTH

    def is_verified(self, gov_markers: Sequence[str] = GOV_DOMAIN_MARKERS) -> bool:
        """Verified flag, or a source link on a government domain."""
        if self.verified:
            return True
        link = self.source_link.lower()
        return bool(link) and any(marker.lower() in link for marker in gov_markers)

    def has_analysis(self) -> bool:
        return bool(self.analysis)

    def to_document(self) -> Dict[str, Any]:
        """Storage representation (without the id)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_api_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass
class PYQFilter:
    """Exam/level/paper/subject selection shared by trend extraction and ranking."""

    exam_code: str
    level: str = ""
    paper: str = ""
    subject: str = ""

    def __post_init__(self):
        self.exam_code = (self.exam_code or "").strip().upper()
        self.level = (self.level or "").strip()
        self.paper = (self.paper or "").strip()
        self.subject = (self.subject or "").strip()
        if not self.exam_code:
            raise InvalidFilterError("Exam code is required")
