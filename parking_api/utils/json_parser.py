# parking_api/utils/json_parser.py
"""
Helpers for the JSON-encoded columns: offline action payloads and
string lists (evidence photo URLs, patrol areas, incident notes).
Encoding happens only at the storage boundary.
"""

import json
from typing import Optional, Any


def safe_parse_json(raw: Optional[str]) -> Optional[Any]:
    """Parse a JSON string safely. Returns None on error."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None


def encode_string_list(values: Optional[list]) -> Optional[str]:
    if values is None:
        return None
    return json.dumps([str(v) for v in values])


def decode_string_list(raw: Optional[str]) -> list:
    """Decode a stored list. Anything that is not a JSON array decodes as []."""
    parsed = safe_parse_json(raw)
    if not isinstance(parsed, list):
        return []
    return [str(v) for v in parsed]
