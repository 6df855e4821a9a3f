"""Paper question endpoints, edited with the weightage model and sent to the backend."""
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException

from api.dependencies import get_evaluator_client
from api.services.evaluator_client import EvaluatorAPIError, EvaluatorClient
from api.utils import raise_for_result
from serialization import (
    QUESTION_TYPES,
    parse_question_payload,
    question_from_dict,
    question_to_dict,
    serialize_question_payload,
)
from weightage import WeightageQuestionModel

router = APIRouter(tags=["questions"])


def _build_backend_payload(payload: dict[str, object]) -> dict[str, object]:
    """Validate an edited question and convert it to the backend format."""
    question_type = str(payload.get("questionType") or "traditional")
    if question_type not in QUESTION_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid question type: {question_type}")

    raw_page = payload.get("pageNumber")
    if isinstance(raw_page, bool):
        raise HTTPException(status_code=400, detail="Page number must be a positive number")
    try:
        page_number = 1 if raw_page is None else int(raw_page)
    except (TypeError, ValueError, OverflowError):
        raise HTTPException(status_code=400, detail="Page number must be a positive number")
    if page_number <= 0:
        raise HTTPException(status_code=400, detail="Page number must be a positive number")

    number = payload.get("questionNumber")
    if not isinstance(number, int) or isinstance(number, bool) or number <= 0:
        raise HTTPException(status_code=400, detail="Question number must be a positive number")

    editor = WeightageQuestionModel(question_from_dict(payload))
    raise_for_result(editor.validate())
    return serialize_question_payload(editor.to_question(), page_number, question_type)


@router.get("/api/papers/{paper_id}/questions")
def list_questions(
    paper_id: str,
    client: Annotated[EvaluatorClient, Depends(get_evaluator_client)],
) -> list[dict[str, object]]:
    """List paper questions in editable form."""
    try:
        questions = client.list_questions(paper_id) or []
    except EvaluatorAPIError as e:
        raise HTTPException(status_code=502, detail=e.message) from e

    editable = []
    for raw in questions:
        if not isinstance(raw, dict):
            continue
        question = question_to_dict(WeightageQuestionModel(parse_question_payload(raw)).to_question())
        question["id"] = raw.get("id")
        question["pageNumber"] = raw.get("page_number", 1)
        question["questionType"] = raw.get("question_type", "traditional")
        editable.append(question)
    return editable


@router.post("/api/papers/{paper_id}/questions")
def add_question(
    paper_id: str,
    client: Annotated[EvaluatorClient, Depends(get_evaluator_client)],
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Add a question to a paper."""
    backend_payload = _build_backend_payload(payload)
    try:
        result = client.create_question(paper_id, backend_payload)
    except EvaluatorAPIError as e:
        raise HTTPException(status_code=502, detail=e.message) from e
    return {"question": backend_payload, "result": result}


@router.put("/api/questions/{question_id}")
def update_question(
    question_id: str,
    client: Annotated[EvaluatorClient, Depends(get_evaluator_client)],
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Update an existing paper question."""
    backend_payload = _build_backend_payload(payload)
    try:
        result = client.update_question(question_id, backend_payload)
    except EvaluatorAPIError as e:
        raise HTTPException(status_code=502, detail=e.message) from e
    return {"question": backend_payload, "result": result}


@router.delete("/api/questions/{question_id}")
def delete_question(
    question_id: str,
    client: Annotated[EvaluatorClient, Depends(get_evaluator_client)],
) -> dict[str, object]:
    """Delete a paper question."""
    try:
        client.delete_question(question_id)
    except EvaluatorAPIError as e:
        raise HTTPException(status_code=502, detail=e.message) from e
    return {"status": "deleted", "id": question_id}
