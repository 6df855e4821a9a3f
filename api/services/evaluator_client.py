"""HTTP client for the remote answer evaluator backend."""
from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Iterable

import requests

from api.config import (
    EVALUATOR_API_URL,
    REQUEST_TIMEOUT_SECONDS,
    TOKEN_PATH,
    UPLOAD_TIMEOUT_SECONDS,
)
from api.services.token_store import TokenStore

log = logging.getLogger(__name__)


class EvaluatorAPIError(Exception):
    """Raised when the backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP {response.status_code}"


class EvaluatorClient:
    def __init__(
        self,
        base_url: str = EVALUATOR_API_URL,
        token_store: TokenStore | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store or TokenStore(TOKEN_PATH)
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, object] | None = None,
        data: dict[str, object] | None = None,
        files: Any = None,
        timeout: float | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {}
        token = self.token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                data=data,
                files=files,
                headers=headers,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as exc:
            log.error("Request to %s failed: %s", url, exc)
            raise EvaluatorAPIError(f"Failed to connect to backend: {exc}", url=url) from exc

        if response.status_code == 401:
            log.info("401 Unauthorized from %s; clearing stored auth data", url)
            self.token_store.clear()

        if not response.ok:
            message = _error_message(response)
            log.warning("API error %s for %s: %s", response.status_code, url, message)
            raise EvaluatorAPIError(message, status_code=response.status_code, url=url)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise EvaluatorAPIError(
                "Invalid JSON in backend response", status_code=response.status_code, url=url
            ) from exc

    def _upload(
        self,
        path: str,
        fields: dict[str, object],
        field_name: str,
        file_paths: Iterable[Path],
    ) -> Any:
        with ExitStack() as stack:
            files = [
                (field_name, (Path(file_path).name, stack.enter_context(open(file_path, "rb"))))
                for file_path in file_paths
            ]
            return self._request(
                "POST", path, data=fields, files=files, timeout=UPLOAD_TIMEOUT_SECONDS
            )

    # Auth

    def login(self, username: str, password: str) -> dict[str, Any]:
        result = self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        token = result.get("token") if isinstance(result, dict) else None
        if not token:
            raise EvaluatorAPIError("Login response did not include a token")
        self.token_store.save(token, result.get("admin"))
        return result

    def verify(self) -> dict[str, Any]:
        return self._request("GET", "/api/auth/verify")

    def logout(self) -> None:
        self.token_store.clear()

    # Papers

    def list_papers(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/papers")

    def list_public_papers(self) -> list[dict[str, Any]]:
        return self._request("GET", "/api/papers/public")

    def upload_paper(self, name: str, image_paths: Iterable[Path]) -> dict[str, Any]:
        return self._upload("/api/papers/upload", {"name": name.strip()}, "papers", image_paths)

    def get_paper(self, paper_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/papers/{paper_id}")

    # Submissions

    def submit_answer_sheets(
        self,
        paper_id: str,
        student_name: str,
        roll_no: str,
        image_paths: list[Path],
    ) -> dict[str, Any]:
        fields = {
            "studentName": student_name.strip(),
            "rollNo": roll_no.strip(),
            "paperId": str(paper_id),
        }
        field_name = "answerSheets" if len(image_paths) > 1 else "answerSheet"
        return self._upload("/api/submissions/submit", fields, field_name, image_paths)

    def list_submissions(self, paper_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/api/submissions/paper/{paper_id}")

    def list_submissions_by_status(self, paper_id: str, status: str) -> Any:
        return self._request("GET", f"/api/submissions/paper/{paper_id}/status/{status}")

    def get_submission(self, submission_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/submissions/{submission_id}")

    def list_pending_files(self, paper_id: str) -> list[dict[str, Any]]:
        result = self._request("GET", f"/api/submissions/pending-files/{paper_id}")
        if isinstance(result, dict):
            return result.get("pendingSubmissions") or []
        return []

    def evaluate_pending(self, body: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/submissions/evaluate-pending", json=body)

    def evaluate_submission(self, submission_id: str) -> dict[str, Any]:
        return self._request("POST", f"/api/submissions/evaluate/{submission_id}")

    # Questions

    def list_questions(self, paper_id: str) -> list[dict[str, Any]]:
        return self._request("GET", f"/api/questions/paper/{paper_id}")

    def create_question(self, paper_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = dict(payload)
        body["paper_id"] = int(paper_id) if str(paper_id).isdigit() else paper_id
        return self._request("POST", "/api/questions", json=body)

    def update_question(self, question_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/questions/{question_id}", json=payload)

    def delete_question(self, question_id: str) -> None:
        self._request("DELETE", f"/api/questions/{question_id}")

    # Manual tests

    def create_manual_test(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/manual-tests", json=payload)
