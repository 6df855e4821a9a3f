"""Service layer for manual test drafts."""
import logging
import shutil
import uuid

from fastapi import HTTPException

from api.config import DRAFTS_DIR
from api.utils import (
    draft_dir,
    draft_path,
    read_json_dict,
    timestamp_sort_key,
    utc_now,
    validate_draft_exists,
    validate_id,
    write_json_file,
)
from authoring import ManualTestBuilder
from serialization import question_from_dict, question_to_dict

logger = logging.getLogger(__name__)


def builder_to_payload(draft_id: str, builder: ManualTestBuilder) -> dict[str, object]:
    """Serialize builder state into the stored draft format."""
    return {
        "id": draft_id,
        "testName": builder.test_name,
        "totalMarks": builder.total_marks,
        "totalQuestions": builder.total_questions,
        "currentQuestion": builder.current_question,
        "complete": builder.complete,
        "questions": [question_to_dict(question) for question in builder.questions],
        "working": question_to_dict(builder.editor.to_question()),
    }


def builder_from_payload(payload: dict[str, object]) -> ManualTestBuilder:
    """Rehydrate builder from stored draft."""
    raw_questions = payload.get("questions") or []
    questions = [
        question_from_dict(raw, question_number=index)
        for index, raw in enumerate(raw_questions, start=1)
        if isinstance(raw, dict)
    ]
    working = payload.get("working")
    builder = ManualTestBuilder(
        test_name=str(payload.get("testName", "")),
        total_marks=float(payload.get("totalMarks") or 0),
        total_questions=int(payload.get("totalQuestions") or 1),
        questions=questions,
        current_question=int(payload.get("currentQuestion") or 1),
        working=question_from_dict(working) if isinstance(working, dict) else None,
    )
    builder.complete = bool(payload.get("complete"))
    return builder


def serialize_summary(draft_id: str, builder: ManualTestBuilder) -> dict[str, object]:
    """Draft state shown alongside the question being edited."""
    return {
        "id": draft_id,
        "testName": builder.test_name,
        "totalMarks": builder.total_marks,
        "totalQuestions": builder.total_questions,
        "currentQuestion": builder.current_question,
        "savedQuestions": len(builder.questions),
        "runningTotal": round(builder.running_total(), 2),
        "remainingMarks": round(builder.remaining_marks(), 2),
        "isMarksValid": builder.is_marks_valid(),
        "totalWeight": builder.editor.calculate_total_weight(),
        "complete": builder.complete,
        "question": question_to_dict(builder.editor.to_question()),
    }


def create_draft(builder: ManualTestBuilder) -> str:
    """Store a new draft and return its ID."""
    draft_id = uuid.uuid4().hex
    draft_dir(draft_id).mkdir(parents=True, exist_ok=True)
    save_draft(draft_id, builder, created_at=utc_now())
    logger.info(f"Created draft {draft_id} for test {builder.test_name!r}")
    return draft_id


def load_draft(draft_id: str) -> ManualTestBuilder:
    """Load draft from file."""
    draft_id = validate_id("draft_id", draft_id)
    validate_draft_exists(draft_id)
    payload = read_json_dict(draft_path(draft_id))
    if payload is None:
        raise HTTPException(status_code=400, detail="Invalid draft payload")
    return builder_from_payload(payload)


def save_draft(
    draft_id: str, builder: ManualTestBuilder, created_at: str | None = None
) -> None:
    """Save draft to file, keeping its creation time."""
    path = draft_path(draft_id)
    if created_at is None:
        existing = read_json_dict(path)
        if existing is not None:
            created_at = existing.get("createdAt")
    payload = builder_to_payload(draft_id, builder)
    payload["createdAt"] = created_at or utc_now()
    payload["updatedAt"] = utc_now()
    write_json_file(path, payload)


def delete_draft(draft_id: str) -> None:
    """Remove draft directory."""
    draft_id = validate_id("draft_id", draft_id)
    directory = draft_dir(draft_id)
    if not directory.exists():
        raise HTTPException(status_code=404, detail="Draft not found")
    shutil.rmtree(directory)


def list_drafts() -> list[dict[str, object]]:
    """List stored drafts, most recently updated first."""
    drafts = []
    for directory in DRAFTS_DIR.iterdir():
        if not directory.is_dir():
            continue
        payload = read_json_dict(directory / "draft.json")
        if payload is None:
            continue
        drafts.append(
            {
                "id": directory.name,
                "testName": payload.get("testName"),
                "totalQuestions": payload.get("totalQuestions"),
                "currentQuestion": payload.get("currentQuestion"),
                "updatedAt": payload.get("updatedAt"),
            }
        )

    drafts.sort(key=lambda item: timestamp_sort_key(item.get("updatedAt")), reverse=True)
    return drafts
