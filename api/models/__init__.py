"""Pydantic models."""
from api.models.manual_tests import (
    DistributeRequest,
    DraftCreate,
    FinalizeResponse,
    OptionUpdate,
    QuestionUpdate,
)

__all__ = [
    "DistributeRequest",
    "DraftCreate",
    "FinalizeResponse",
    "OptionUpdate",
    "QuestionUpdate",
]
