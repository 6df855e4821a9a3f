"""Utility modules."""
from api.utils.json_utils import (
    json_dump,
    json_load,
    read_json_dict,
    read_json_file,
    write_json_file,
)
from api.utils.paths import draft_dir, draft_path
from api.utils.time_utils import parse_iso_timestamp, timestamp_sort_key, utc_now
from api.utils.validation import raise_for_result, validate_draft_exists, validate_id

__all__ = [
    "json_dump",
    "json_load",
    "read_json_dict",
    "read_json_file",
    "write_json_file",
    "draft_dir",
    "draft_path",
    "parse_iso_timestamp",
    "timestamp_sort_key",
    "utc_now",
    "raise_for_result",
    "validate_draft_exists",
    "validate_id",
]
