"""Path utilities for authoring drafts."""
from pathlib import Path

from api.config import DRAFTS_DIR


def draft_dir(draft_id: str) -> Path:
    """Get directory for draft."""
    return DRAFTS_DIR / draft_id


def draft_path(draft_id: str) -> Path:
    """Get path to draft JSON."""
    return draft_dir(draft_id) / "draft.json"
