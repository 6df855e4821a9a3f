import pytest
from fastapi import HTTPException

from api.routes import questions
from api.services.evaluator_client import EvaluatorAPIError


class FakeClient:
    def __init__(self, stored=None, error: Exception | None = None):
        self.stored = stored or []
        self.error = error
        self.created = []
        self.updated = []
        self.deleted = []

    def _check(self):
        if self.error:
            raise self.error

    def list_questions(self, paper_id):
        self._check()
        return self.stored

    def create_question(self, paper_id, payload):
        self._check()
        self.created.append((paper_id, payload))
        return {"id": 99}

    def update_question(self, question_id, payload):
        self._check()
        self.updated.append((question_id, payload))
        return {"id": question_id}

    def delete_question(self, question_id):
        self._check()
        self.deleted.append(question_id)


def _edited_question(**overrides):
    payload = {
        "questionNumber": 2,
        "questionText": "Which are prime?",
        "isMultipleChoice": True,
        "totalMarks": 2,
        "options": [
            {"id": "A", "text": "2", "isCorrect": True, "weight": 1},
            {"id": "B", "text": "3", "isCorrect": True, "weight": 1},
            {"id": "C", "text": "4", "isCorrect": False, "weight": 0},
        ],
        "pageNumber": 2,
        "questionType": "omr",
    }
    payload.update(overrides)
    return payload


def test_list_questions_returns_editable_form() -> None:
    client = FakeClient(
        stored=[
            {
                "id": 7,
                "question_number": 1,
                "question_text": "Pick the metals",
                "correct_options": ["0", "2"],
                "options": {"0": "Iron", "1": "Oxygen", "2": "Copper"},
                "weightages": {"A": 0.5, "C": 0.5},
                "points_per_blank": 1,
                "page_number": 3,
                "question_type": "mixed",
            },
            "garbage",
        ]
    )

    listing = questions.list_questions("12", client)

    assert len(listing) == 1
    question = listing[0]
    assert question["id"] == 7
    assert question["pageNumber"] == 3
    assert question["questionType"] == "mixed"
    assert [option["isCorrect"] for option in question["options"]] == [True, False, True]
    assert question["options"][0]["text"] == "Iron"


def test_add_question_sends_backend_payload() -> None:
    client = FakeClient()
    response = questions.add_question("12", client, _edited_question())

    paper_id, payload = client.created[0]
    assert paper_id == "12"
    assert payload["correct_option"] == "A,B"
    assert payload["correct_options"] == ["A", "B"]
    assert payload["page_number"] == 2
    assert payload["question_type"] == "omr"
    assert response["result"] == {"id": 99}


def test_add_question_rejects_weight_mismatch() -> None:
    client = FakeClient()
    with pytest.raises(HTTPException) as excinfo:
        questions.add_question("12", client, _edited_question(totalMarks=3))
    assert excinfo.value.status_code == 400
    assert excinfo.value.detail["title"] == "Weight Mismatch"
    assert client.created == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"questionType": "essay"},
        {"pageNumber": 0},
        {"pageNumber": "first"},
        {"pageNumber": True},
        {"pageNumber": -3},
        {"questionNumber": "2"},
    ],
)
def test_add_question_rejects_bad_fields(overrides) -> None:
    with pytest.raises(HTTPException) as excinfo:
        questions.add_question("12", FakeClient(), _edited_question(**overrides))
    assert excinfo.value.status_code == 400


def test_add_question_defaults_missing_page_number() -> None:
    client = FakeClient()
    payload = _edited_question()
    del payload["pageNumber"]
    questions.add_question("12", client, payload)
    assert client.created[0][1]["page_number"] == 1


def test_update_and_delete_question() -> None:
    client = FakeClient()
    questions.update_question("7", client, _edited_question())
    assert client.updated[0][0] == "7"

    assert questions.delete_question("7", client) == {"status": "deleted", "id": "7"}
    assert client.deleted == ["7"]


def test_backend_error_is_502() -> None:
    client = FakeClient(error=EvaluatorAPIError("Paper not found", status_code=404))
    with pytest.raises(HTTPException) as excinfo:
        questions.list_questions("12", client)
    assert excinfo.value.status_code == 502
    assert excinfo.value.detail == "Paper not found"
