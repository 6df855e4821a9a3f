"""Service for evaluating pending submissions on the backend."""
import logging
import time
from typing import Any, Callable

from api.config import BATCH_DELAY_SECONDS, EVALUATION_MAX_RETRIES
from api.services.evaluator_client import EvaluatorAPIError, EvaluatorClient

logger = logging.getLogger(__name__)

# Sources whose files are addressed by fileId rather than submissionId
REMOTE_FILE_SOURCES = {"drive", "minio"}


def build_evaluation_request(paper_id: str, submission: dict[str, Any]) -> dict[str, Any]:
    """Build request body for one pending submission."""
    body: dict[str, Any] = {
        "paperId": paper_id,
        "studentName": submission.get("studentName"),
        "rollNo": submission.get("rollNo"),
        "source": submission.get("source"),
    }
    total_pages = submission.get("totalPages") or 0
    if total_pages > 1:
        body["pages"] = submission.get("pages")
        body["fileName"] = f"{submission.get('studentName')}_{total_pages}_pages"
    elif submission.get("source") in REMOTE_FILE_SOURCES:
        body["fileId"] = submission.get("fileId")
        body["fileName"] = submission.get("fileName")
    else:
        body["submissionId"] = submission.get("submissionId")
        body["imageUrl"] = submission.get("imageUrl")
    return body


def evaluate_with_retry(
    client: EvaluatorClient,
    paper_id: str,
    submission: dict[str, Any],
    max_retries: int = EVALUATION_MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """Evaluate one submission, backing off 2s, 4s, ... between attempts."""
    student = submission.get("studentName")
    body = build_evaluation_request(paper_id, submission)
    last_error: EvaluatorAPIError | None = None

    for attempt in range(1, max_retries + 1):
        logger.info(f"Attempt {attempt}/{max_retries} for {student}")
        try:
            result = client.evaluate_pending(body) or {}
            logger.info(
                f"Evaluation successful for {student}: "
                f"{result.get('score')}/{result.get('maxPossibleScore') or result.get('totalQuestions')}"
            )
            return result
        except EvaluatorAPIError as e:
            logger.error(f"Attempt {attempt} failed for {student}: {e.message}")
            last_error = e
            if attempt < max_retries:
                delay = 2 ** attempt
                logger.info(f"Retrying in {delay}s")
                sleep(delay)

    raise last_error or EvaluatorAPIError(f"Failed after {max_retries} attempts")


def evaluate_batch(
    client: EvaluatorClient,
    paper_id: str,
    submissions: list[dict[str, Any]],
    max_retries: int = EVALUATION_MAX_RETRIES,
    delay_seconds: float = BATCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """Evaluate submissions one by one with a fixed pause between them."""
    results: dict[str, Any] = {"success": 0, "failed": 0, "errors": []}

    for index, submission in enumerate(submissions):
        student = submission.get("studentName")
        try:
            evaluate_with_retry(client, paper_id, submission, max_retries, sleep)
            results["success"] += 1
        except EvaluatorAPIError as e:
            results["failed"] += 1
            results["errors"].append(f"{student}: {e.message}")
            logger.error(f"Failed to evaluate {student}: {e.message}")

        if index < len(submissions) - 1:
            sleep(delay_seconds)

    logger.info(
        f"Batch evaluation complete: {results['success']} succeeded, {results['failed']} failed"
    )
    return results
