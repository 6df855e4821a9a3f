import pytest

from api.services import evaluation_service
from api.services.evaluator_client import EvaluatorAPIError


class FakeClient:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.bodies = []

    def evaluate_pending(self, body):
        self.bodies.append(body)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_request_body_for_each_source() -> None:
    multi = evaluation_service.build_evaluation_request(
        "9",
        {"studentName": "Asha", "rollNo": "1", "source": "drive", "totalPages": 2, "pages": [{}, {}]},
    )
    assert multi["fileName"] == "Asha_2_pages"
    assert multi["pages"] == [{}, {}]

    drive = evaluation_service.build_evaluation_request(
        "9", {"studentName": "Ben", "source": "minio", "fileId": "f1", "fileName": "ben.jpg"}
    )
    assert drive["fileId"] == "f1"
    assert "submissionId" not in drive

    database = evaluation_service.build_evaluation_request(
        "9", {"studentName": "Cy", "source": "database", "submissionId": 4, "imageUrl": "/x.jpg"}
    )
    assert database["submissionId"] == 4
    assert database["paperId"] == "9"


def test_retry_backs_off_exponentially() -> None:
    client = FakeClient([EvaluatorAPIError("busy"), EvaluatorAPIError("busy"), {"score": 8}])
    sleeps = []

    result = evaluation_service.evaluate_with_retry(
        client, "9", {"studentName": "Asha"}, max_retries=3, sleep=sleeps.append
    )
    assert result == {"score": 8}
    assert sleeps == [2, 4]


def test_retry_gives_up_with_last_error() -> None:
    client = FakeClient([EvaluatorAPIError("one"), EvaluatorAPIError("two"), EvaluatorAPIError("three")])
    sleeps = []

    with pytest.raises(EvaluatorAPIError) as excinfo:
        evaluation_service.evaluate_with_retry(
            client, "9", {"studentName": "Asha"}, max_retries=3, sleep=sleeps.append
        )
    assert excinfo.value.message == "three"
    assert sleeps == [2, 4]


def test_batch_counts_results_and_waits_between_items() -> None:
    client = FakeClient([{"score": 1}, EvaluatorAPIError("bad image"), {"score": 2}])
    sleeps = []

    results = evaluation_service.evaluate_batch(
        client,
        "9",
        [{"studentName": "A"}, {"studentName": "B"}, {"studentName": "C"}],
        max_retries=1,
        delay_seconds=5,
        sleep=sleeps.append,
    )
    assert results == {"success": 2, "failed": 1, "errors": ["B: bad image"]}
    assert sleeps == [5, 5]
