"""Persistent storage for the backend bearer token."""
from pathlib import Path

from api.utils import read_json_dict, write_json_file


class TokenStore:
    """Keeps ``authToken`` and ``userData`` in a small JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict[str, object]:
        return read_json_dict(self.path) or {}

    def get_token(self) -> str | None:
        token = self._read().get("authToken")
        return token if isinstance(token, str) and token else None

    def get_user(self) -> dict[str, object] | None:
        user = self._read().get("userData")
        return user if isinstance(user, dict) else None

    def save(self, token: str, user: dict[str, object] | None = None) -> None:
        write_json_file(self.path, {"authToken": token, "userData": user})

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class MemoryTokenStore:
    """Token holder for a single request; nothing is written to disk."""

    def __init__(self, token: str | None = None):
        self.token = token

    def get_token(self) -> str | None:
        return self.token

    def get_user(self) -> dict[str, object] | None:
        return None

    def save(self, token: str, user: dict[str, object] | None = None) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
