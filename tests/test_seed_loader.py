"""
Seed normalization and file loading.
"""
import json
import pandas as pd
import pytest
from pyq_trends.services.seed_loader import load_seed_file, normalize_seed_item, normalize_seed_items
from pyq_trends.utils.exceptions import SeedDataError


def test_normalize_seed_item_defaults_and_splitting():
    record = normalize_seed_item({
        "year": "2022",
        "question": "Explain the significance of the 73rd Amendment.",
        "topicTags": "Polity, Local Government, ",
        "verified": 1,
    }, current_year=2024)

    assert record.exam_code == "UPSC"
    assert record.year == 2022
    assert record.topic_tags == ["Polity", "Local Government"]
    assert record.verified is True


def test_normalize_seed_item_rejects_invalid():
    assert normalize_seed_item({"year": 2022, "question": "short"}, current_year=2024) is None
    assert normalize_seed_item({"year": None, "question": "A long enough question text"}, current_year=2024) is None
    assert normalize_seed_item({"year": 1950, "question": "A long enough question text"}, current_year=2024) is None


def test_normalize_seed_items_errors():
    with pytest.raises(SeedDataError):
        normalize_seed_items([])
    with pytest.raises(SeedDataError):
        normalize_seed_items([{"year": 2020, "question": "tiny"}], current_year=2024)


def test_normalize_seed_items_drops_invalid():
    records = normalize_seed_items([
        {"exam": "pcs", "year": 2020, "question": "Describe the agro-climatic zones of the state."},
        {"exam": "pcs", "year": 2020, "question": "bad"},
    ], current_year=2024)
    assert [r.exam_code for r in records] == ["PCS"]


def test_load_json_seed(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps({"questions": [
        {"exam": "UPSC", "year": 2023, "question": "Critically examine India's semiconductor policy.",
         "topicTags": ["Economy"], "keywords": ["semiconductors"]},
    ]}), encoding="utf-8")

    records = load_seed_file(str(path), current_year=2024)
    assert len(records) == 1
    assert records[0].keywords == ["semiconductors"]


def test_load_csv_seed(tmp_path):
    path = tmp_path / "questions.csv"
    pd.DataFrame([
        {"exam": "UPSC", "level": "Mains", "year": 2022, "question": "Discuss the causes of urban flooding in India.",
         "topicTags": "Geography,Disaster Management", "verified": True},
        {"exam": "UPSC", "level": None, "year": None, "question": "Missing year question text", "topicTags": None,
         "verified": False},
    ]).to_csv(path, index=False)

    records = load_seed_file(str(path), current_year=2024)
    assert len(records) == 1
    assert records[0].topic_tags == ["Geography", "Disaster Management"]
    assert records[0].year == 2022
    assert records[0].verified is True


def test_load_seed_file_errors(tmp_path):
    with pytest.raises(SeedDataError):
        load_seed_file(str(tmp_path / "missing.json"))

    path = tmp_path / "questions.txt"
    path.write_text("nothing", encoding="utf-8")
    with pytest.raises(SeedDataError):
        load_seed_file(str(path))


def test_scalar_label_values_are_kept_as_single_labels():
    record = normalize_seed_item({
        "year": 2021,
        "question": "Analyse the impact of GST on state finances.",
        "topicTags": 7,
        "keywords": 5,
    }, current_year=2024)
    assert record.topic_tags == ["7"]
    assert record.keywords == ["5"]
