"""
FastAPI application initialization.
PYQ trend analysis and recommendation API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pyq_trends.core.config import settings
from pyq_trends.core.logging_config import logger
from pyq_trends.api.routes import router
from pyq_trends.services.question_store import InMemoryQuestionStore, close_question_store, get_question_store
from pyq_trends.services.seed_loader import load_seed_file
from pyq_trends.utils.exceptions import PYQServiceException


# Initialize FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description=settings.api_description,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler for PYQServiceException
@app.exception_handler(PYQServiceException)
async def pyq_service_exception_handler(request: Request, exc: PYQServiceException):
    """Handle service-specific exceptions."""
    logger.error(f"PYQServiceException: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
            "detail": "An error occurred while processing PYQ data"
        }
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred",
            "detail": str(exc) if settings.environment == "development" else None
        }
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Question store: {settings.store_backend}")

    store = get_question_store()
    if settings.seed_file_path and isinstance(store, InMemoryQuestionStore):
        records = load_seed_file(settings.seed_file_path)
        await store.insert_many(records)
        logger.info(f"Seeded memory store with {len(records)} questions from {settings.seed_file_path}")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info(f"Shutting down {settings.api_title}")
    close_question_store()


# Include routers
app.include_router(router, tags=["PYQ"])


# Health check for load balancers/monitoring
@app.get("/ping")
async def ping():
    """Simple ping endpoint for monitoring."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pyq_trends.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development"
    )
