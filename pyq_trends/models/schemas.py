"""
Pydantic models for request and response validation.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime


def _optional_int(value: Any) -> Optional[int]:
    """Unparseable numbers become None so the service falls back to its defaults."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class MostProbableRequest(BaseModel):
    """Request model for the most-probable questions endpoint."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "exam": "UPSC",
                "level": "Mains",
                "paper": "GS-2",
                "subject": "Polity",
                "limit": 20,
                "yearRange": 5
            }
        }
    )

    exam: str = Field(default="UPSC", description="Exam code, e.g. UPSC, PCS, SSC")
    level: str = Field(default="", description="Prelims, Mains, Interview or empty")
    paper: str = Field(default="", description="Paper label substring, e.g. GS-2")
    subject: str = Field(default="", description="Optional subject to prioritise")
    limit: Optional[int] = Field(default=None, description="Number of questions to return")
    year_range: Optional[int] = Field(default=None, alias="yearRange", description="Trend window in years")

    @field_validator("limit", "year_range", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> Optional[int]:
        return _optional_int(value)

    @field_validator("exam", "level", "paper", "subject", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)


class TrendsPayload(BaseModel):
    """Trend metadata returned alongside ranked questions."""

    model_config = ConfigDict(populate_by_name=True)

    top_topics: List[str] = Field(default_factory=list, alias="topTopics")
    top_keywords: List[str] = Field(default_factory=list, alias="topKeywords")
    year_distribution: Dict[int, int] = Field(default_factory=dict, alias="yearDistribution")
    total_analyzed: int = Field(default=0, alias="totalAnalyzed")


class MostProbableResponse(BaseModel):
    """Response model for the most-probable questions endpoint."""

    success: bool = True
    questions: List[Dict[str, Any]] = Field(default_factory=list, description="Ranked questions")
    trends: TrendsPayload = Field(default_factory=TrendsPayload)
    count: int = Field(default=0, description="Number of questions returned")


class RecommendationsResponse(BaseModel):
    """Response model for the recommendations endpoint."""

    success: bool = True
    recommendations: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    padded: bool = Field(default=False, description="Whether static sample questions were added")


class SeedResponse(BaseModel):
    """Response model for the seed endpoint."""

    ok: bool = True
    inserted: int = 0


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    store_backend: str = Field(..., description="Configured question store backend")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(default=None, description="Detailed error information")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
