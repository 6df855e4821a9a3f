"""Validation utilities."""
from pathlib import Path

from fastapi import HTTPException

from api.utils.paths import draft_path
from models import ValidationResult


def validate_id(name: str, value: str) -> str:
    """Validate ID string (no path traversal)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if Path(cleaned).name != cleaned or "/" in cleaned or "\\" in cleaned:
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned


def validate_draft_exists(draft_id: str) -> None:
    """Validate that draft exists."""
    if not draft_path(draft_id).exists():
        raise HTTPException(status_code=404, detail="Draft not found")


def raise_for_result(result: ValidationResult) -> None:
    """Turn a failed validation result into a 400 response."""
    if not result:
        raise HTTPException(
            status_code=400,
            detail={"title": result.title, "message": result.message},
        )
