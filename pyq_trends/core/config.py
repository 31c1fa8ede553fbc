"""
Configuration management using Pydantic Settings.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    log_level: str = "INFO"
    environment: str = "development"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_title: str = "PYQ Trend & Recommendation API"
    api_version: str = "1.0.0"
    api_description: str = "FastAPI service for trend analysis and ranking of previous year exam questions"
    api_access_token: str = "pyq-local-token"

    # Question Store Configuration
    store_backend: str = "mongo"  # "mongo" or "memory"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "exam_prep"
    mongodb_collection: str = "pyqs"
    mongodb_timeout_ms: int = 5000
    seed_file_path: Optional[str] = None

    # Trend Analysis Configuration
    trend_window_years: int = 5
    trend_sample_size: int = 500
    max_trend_sample_size: int = 2000
    top_topics_limit: int = 10
    top_keywords_limit: int = 15
    gov_domain_markers: List[str] = [".gov.in", ".nic.in"]

    # Result Limits
    default_results_limit: int = 20
    max_results_limit: int = 100
    recommendations_limit: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
