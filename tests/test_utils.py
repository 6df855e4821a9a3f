from pathlib import Path

import pytest
from fastapi import HTTPException

from api.utils import json_utils, paths, time_utils, validation
from models import ValidationResult


def test_json_round_trip(tmp_path: Path) -> None:
    payload = {"testName": "Контрольная", "count": 2}
    dumped = json_utils.json_dump(payload)
    assert "Контрольная" in dumped
    assert json_utils.json_load(dumped) == payload

    path = tmp_path / "nested" / "payload.json"
    json_utils.write_json_file(path, payload)
    assert json_utils.read_json_file(path, {}) == payload
    assert json_utils.read_json_file(tmp_path / "missing.json", {"fallback": True}) == {"fallback": True}
    assert not list(path.parent.glob("*.tmp"))

    listing = tmp_path / "list.json"
    json_utils.write_json_file(listing, [1, 2])
    assert json_utils.read_json_dict(listing) is None
    assert json_utils.read_json_dict(path) == payload


def test_time_utils_parsing() -> None:
    timestamp = time_utils.utc_now()
    parsed = time_utils.parse_iso_timestamp(timestamp)
    assert parsed is not None

    zulu = "2024-01-01T12:00:00Z"
    parsed_zulu = time_utils.parse_iso_timestamp(zulu)
    assert parsed_zulu is not None
    assert parsed_zulu.tzinfo is not None

    assert time_utils.parse_iso_timestamp("") is None
    assert time_utils.parse_iso_timestamp(123) is None

    naive = time_utils.parse_iso_timestamp("2024-01-01T12:00:00")
    assert naive == parsed_zulu

    assert time_utils.timestamp_sort_key("garbage") == 0.0
    assert time_utils.timestamp_sort_key(zulu) < time_utils.timestamp_sort_key("2024-01-02T00:00:00+00:00")


def test_paths_helpers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths, "DRAFTS_DIR", tmp_path)
    assert paths.draft_dir("abc") == tmp_path / "abc"
    assert paths.draft_path("abc") == tmp_path / "abc" / "draft.json"


def test_validate_id() -> None:
    assert validation.validate_id("draft_id", " abc ") == "abc"
    with pytest.raises(HTTPException):
        validation.validate_id("draft_id", "")
    with pytest.raises(HTTPException):
        validation.validate_id("draft_id", "../bad")


def test_validate_draft_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths, "DRAFTS_DIR", tmp_path)
    with pytest.raises(HTTPException) as excinfo:
        validation.validate_draft_exists("missing")
    assert excinfo.value.status_code == 404

    draft = paths.draft_path("exists")
    draft.parent.mkdir(parents=True, exist_ok=True)
    draft.write_text("{}", encoding="utf-8")
    validation.validate_draft_exists("exists")


def test_raise_for_result() -> None:
    validation.raise_for_result(ValidationResult.success())
    with pytest.raises(HTTPException) as excinfo:
        validation.raise_for_result(
            ValidationResult.failure("Please enter the correct answer")
        )
    assert excinfo.value.status_code == 400
    assert excinfo.value.detail["message"] == "Please enter the correct answer"
