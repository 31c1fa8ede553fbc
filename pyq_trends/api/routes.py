"""
API routes for the PYQ trend service.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, status
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.models.question import PYQFilter
from pyq_trends.models.schemas import (
    ErrorResponse,
    HealthCheckResponse,
    MostProbableRequest,
    MostProbableResponse,
    RecommendationsResponse,
    SeedResponse
)
from pyq_trends.services.pyq_recommender import find_most_probable, get_recommendations
from pyq_trends.services.question_store import QuestionStore, get_question_store
from pyq_trends.services.seed_loader import normalize_seed_items
from pyq_trends.services.trend_extractor import extract_trends
from pyq_trends.utils.exceptions import InvalidFilterError, PYQServiceException, StoreError


router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    503: {"model": ErrorResponse, "description": "Question store unavailable"}
}


async def require_access_token(access_token: Optional[str] = Header(default=None, alias="accessToken")):
    """Reject requests without the configured access token."""
    if not access_token or access_token != settings.api_access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )


def _service_error(e: PYQServiceException) -> HTTPException:
    """Map service exceptions to HTTP errors."""
    if isinstance(e, StoreError):
        logger.error(f"[API] Store error: {e}")
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if isinstance(e, InvalidFilterError):
        logger.warning(f"[API] Invalid filter: {e}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.error(f"[API] Service error: {e}")
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/", response_model=dict)
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "description": settings.api_description,
        "endpoints": {
            "most_probable": "/pyq/most-probable",
            "recommendations": "/pyq/recommendations",
            "trends": "/pyq/trends",
            "seed": "/pyq/seed",
            "health": "/health",
            "docs": "/docs"
        }
    }


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """
    Health check endpoint to verify service status.
    """
    return HealthCheckResponse(
        status="healthy",
        version=settings.api_version,
        store_backend=settings.store_backend
    )


@router.post(
    "/pyq/most-probable",
    response_model=MostProbableResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES
)
async def most_probable(
    request: MostProbableRequest,
    store: QuestionStore = Depends(get_question_store)
):
    """
    Most probable questions based on recent topic and keyword trends.

    1. Builds topic/keyword/year frequency over the last `yearRange` years
    2. Re-queries questions matching the top trends (or the subject)
    3. Scores by recency, trend match, analysis, verification and subject
    """
    try:
        pyq_filter = PYQFilter(
            exam_code=request.exam,
            level=request.level,
            paper=request.paper,
            subject=request.subject
        )
        result = await find_most_probable(
            store,
            pyq_filter,
            limit=request.limit,
            year_range=request.year_range
        )
        response = result.to_response()
        logger.info(
            f"[API] Most-probable: {response['count']} questions, "
            f"{response['trends']['totalAnalyzed']} analyzed"
        )
        return response

    except PYQServiceException as e:
        raise _service_error(e)


@router.get(
    "/pyq/recommendations",
    response_model=RecommendationsResponse,
    responses={401: {"description": "Missing or invalid access token"}, **ERROR_RESPONSES},
    dependencies=[Depends(require_access_token)]
)
async def recommendations(
    exam: str = Query(default="UPSC"),
    level: str = Query(default=""),
    paper: str = Query(default=""),
    subject: str = Query(default=""),
    limit: Optional[int] = Query(default=None),
    store: QuestionStore = Depends(get_question_store)
):
    """
    Recommended questions with a `recommendationReason` each.
    Short lists are padded with static sample questions.
    """
    try:
        pyq_filter = PYQFilter(exam_code=exam, level=level, paper=paper, subject=subject)
        return await get_recommendations(store, pyq_filter, limit=limit)

    except PYQServiceException as e:
        raise _service_error(e)


@router.get("/pyq/trends", response_model=dict, responses=ERROR_RESPONSES)
async def trends(
    exam: str = Query(default="UPSC"),
    level: str = Query(default=""),
    paper: str = Query(default=""),
    year_range: Optional[str] = Query(default=None, alias="yearRange"),
    sample_size: Optional[str] = Query(default=None, alias="sampleSize"),
    store: QuestionStore = Depends(get_question_store)
):
    """
    Raw trend summary (full top lists and frequency tables) for a filter.
    """
    try:
        pyq_filter = PYQFilter(exam_code=exam, level=level, paper=paper)
        summary = await extract_trends(
            store,
            pyq_filter,
            window_years=year_range,
            max_sample_size=sample_size
        )
        return {"success": True, "trends": summary.to_dict()}

    except PYQServiceException as e:
        raise _service_error(e)


@router.post(
    "/pyq/seed",
    response_model=SeedResponse,
    responses={401: {"description": "Missing or invalid access token"}, **ERROR_RESPONSES},
    dependencies=[Depends(require_access_token)]
)
async def seed(
    items: List[Dict[str, Any]] = Body(...),
    store: QuestionStore = Depends(get_question_store)
):
    """
    Insert a batch of questions. Invalid items are dropped.
    """
    try:
        records = normalize_seed_items(items)
        inserted = await store.insert_many(records)
        logger.info(f"[API] Seeded {inserted} of {len(items)} items")
        return SeedResponse(ok=True, inserted=inserted)

    except PYQServiceException as e:
        raise _service_error(e)
