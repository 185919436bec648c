# easybook/core/args.py
"""
Parsers for arguments crossing the invocation boundary as text.
"""
import math
import re
from typing import List

from easybook.core.canon import load_json
from easybook.core.errors import DecodeError, ValidationError
from easybook.core.types import ServiceLevel

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_COUNTERS = (
    "total_feedbacks",
    "total_unfulfilled_commitments",
    "total_compensations",
    "total_no_compensations",
)


def parse_text(value: str) -> str:
    """Plain string argument; it must be encodable as UTF-8 (no lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(f"cannot parse {value!r} as text: not valid UTF-8") from e
    return value


def parse_bool(value: str) -> bool:
    """Accept exactly "true" or "false" (case-sensitive)."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValidationError(f"cannot parse {value!r} as bool: expected 'true' or 'false'")


def parse_decimal(value: str) -> float:
    if not _DECIMAL_RE.fullmatch(value):
        raise ValidationError(f"cannot parse {value!r} as decimal number")
    number = float(value)
    # 1e999 matches the literal grammar but overflows to inf
    if number in (float("inf"), float("-inf")):
        raise ValidationError(f"decimal {value!r} is out of range")
    return number


def parse_service_levels(value: str) -> List[ServiceLevel]:
    """
    JSON array of service-level objects, in the same shape the codec writes.
    Agreement counters are unsigned at the boundary.
    """
    try:
        items = load_json(parse_text(value).encode("utf-8"))
        if not isinstance(items, list):
            raise DecodeError("expected a JSON array")
        levels = [ServiceLevel.from_dict(item) for item in items]
    except DecodeError as e:
        raise ValidationError(f"cannot parse service levels: {e}") from e

    for level in levels:
        if not (math.isfinite(level.satisfaction_rate) and math.isfinite(level.rule_abiding_rate)):
            raise ValidationError(f"service level {level.id}: rates must be finite numbers")
        for agreement in level.agreements:
            for counter in _COUNTERS:
                if getattr(agreement, counter) < 0:
                    raise ValidationError(
                        f"agreement {agreement.id}: {counter} must not be negative"
                    )
    return levels
