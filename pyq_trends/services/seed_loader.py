"""
Seed data loading for the question store.
Reads question items from JSON, CSV or parquet and normalizes them into records.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import pandas as pd
from pydantic import ValidationError
from pyq_trends.core.logging_config import logger
from pyq_trends.models.question import PYQRecord
from pyq_trends.utils.exceptions import SeedDataError


DEFAULT_EXAM = "UPSC"


def _split_labels(value: Any) -> List[Any]:
    """Accept a list of labels or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    if hasattr(value, "tolist"):
        value = value.tolist()
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def normalize_seed_item(item: Dict[str, Any], current_year: Optional[int] = None) -> Optional[PYQRecord]:
    """
    Normalize one raw seed item into a record.

    Args:
        item: Raw dict (camelCase keys as in the question collection)
        current_year: Reference year for validity checks

    Returns:
        PYQRecord, or None if the item is not a valid question
    """
    try:
        record = PYQRecord.model_validate({
            "exam": item.get("exam") or DEFAULT_EXAM,
            "level": item.get("level") or "",
            "paper": item.get("paper") or "",
            "year": item.get("year"),
            "question": item.get("question") or "",
            "topicTags": _split_labels(item.get("topicTags")),
            "keywords": _split_labels(item.get("keywords")),
            "theme": item.get("theme") or "",
            "sourceLink": item.get("sourceLink") or "",
            "verified": item.get("verified") or False,
            "analysis": item.get("analysis") or "",
        })
    except ValidationError as e:
        logger.warning(f"[SeedLoader] Invalid seed item: {e}")
        return None

    if not record.is_valid(current_year):
        return None
    return record


def normalize_seed_items(items: Iterable[Dict[str, Any]], current_year: Optional[int] = None) -> List[PYQRecord]:
    """
    Normalize raw items, dropping invalid ones.

    Raises:
        SeedDataError: If no item survives normalization
    """
    items = list(items)
    if not items:
        raise SeedDataError("Provide an array of PYQ items")

    records = []
    for item in items:
        record = normalize_seed_item(item, current_year)
        if record is not None:
            records.append(record)

    skipped = len(items) - len(records)
    if skipped:
        logger.warning(f"[SeedLoader] Dropped {skipped} invalid seed items")
    if not records:
        raise SeedDataError("No valid items to insert")
    return records


def _read_rows(path: Path) -> List[Dict[str, Any]]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, dict):
            payload = payload.get("questions", [])
        return payload

    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".parquet", ".pq"):
        df = pd.read_parquet(path)
    else:
        raise SeedDataError(f"Unsupported seed file type: {path.suffix}")

    # Missing cells come back as NaN
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def load_seed_file(file_path: str, current_year: Optional[int] = None) -> List[PYQRecord]:
    """
    Load and normalize questions from a seed file.

    Args:
        file_path: Path to a .json, .csv or .parquet file
        current_year: Reference year for validity checks

    Returns:
        List of valid PYQRecord objects
    """
    path = Path(file_path)
    if not path.exists():
        raise SeedDataError(f"Seed file not found: {file_path}")

    rows = _read_rows(path)
    logger.info(f"[SeedLoader] Read {len(rows)} rows from {path.name}")
    return normalize_seed_items(rows, current_year)
