# easybook/core/canon.py
import json
from typing import Any

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

from easybook.core.errors import DecodeError


def canonical_json(obj: Any) -> bytes:
    """
    Produce deterministic UTF-8 bytes according to RFC 8785 (JSON Canonicalization Scheme).
    This is the byte form written to the world state and returned to callers.
    """
    return jcs.canonicalize(obj)


def load_json(data: bytes) -> Any:
    """Parse stored bytes back into plain JSON values, raising DecodeError on garbage."""
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"malformed JSON value: {e}") from e
