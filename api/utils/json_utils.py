"""JSON file utilities."""
import json
from pathlib import Path


def json_dump(payload: object) -> str:
    """Serialize object to pretty JSON string."""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def json_load(data: str) -> object:
    """Deserialize JSON string to object."""
    return json.loads(data)


def read_json_file(path: Path, default: object) -> object:
    """Read and parse JSON file, return default if not exists."""
    if not path.exists():
        return default
    return json_load(path.read_text(encoding="utf-8"))


def read_json_dict(path: Path) -> dict[str, object] | None:
    """Read a JSON object; None when missing or not an object."""
    payload = read_json_file(path, None)
    return payload if isinstance(payload, dict) else None


def write_json_file(path: Path, payload: object) -> None:
    """Write object as JSON file, replacing any previous content atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json_dump(payload), encoding="utf-8")
    tmp_path.replace(path)
