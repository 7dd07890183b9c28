"""
Helper functions for reading provider payloads.

Provider records are loosely structured: the same value can live under
several paths depending on plan, endpoint and unit system. These helpers take
an ordered list of candidate paths and a final default.
"""

import re
from typing import Any, Iterable, List, Optional

_MISSING = object()


def _walk(record: Any, path: str) -> Any:
    """Follow a dotted path ('Temperature.Imperial.Value', 'weather.0.main')."""
    value = record
    for part in path.split("."):
        if isinstance(value, dict):
            if part not in value:
                return _MISSING
            value = value[part]
        elif isinstance(value, (list, tuple)) and part.lstrip("-").isdigit():
            index = int(part)
            if index >= len(value) or index < -len(value):
                return _MISSING
            value = value[index]
        else:
            return _MISSING
    return value


def extract_value(record: Any, paths: Iterable[str], default: Any = None) -> Any:
    """
    Get the first present value among candidate paths.

    A value is present when the path exists, is not None and is not a
    nested object.

    Args:
        record: Provider record
        paths: Candidate dotted paths, in priority order
        default: Value returned when no path is present

    Returns:
        First present value or default
    """
    for path in paths:
        value = _walk(record, path)
        if value is _MISSING or value is None or isinstance(value, (dict, list)):
            continue
        return value
    return default


def extract_number(record: Any, paths: Iterable[str], default: Optional[float] = None) -> Optional[float]:
    """
    Get the first present numeric value among candidate paths.

    Values that cannot be read as a number are skipped.

    Args:
        record: Provider record
        paths: Candidate dotted paths, in priority order
        default: Value returned when no path holds a number

    Returns:
        First numeric value as float or default
    """
    for path in paths:
        value = _walk(record, path)
        if value is _MISSING or value is None or isinstance(value, (bool, dict, list)):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            continue
    return default


def extract_text(record: Any, paths: Iterable[str], default: str = "") -> str:
    """Get the first present value among candidate paths as text."""
    value = extract_value(record, paths, None)
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def first_match(patterns: List[str], text: str, flags: int = re.IGNORECASE) -> Optional["re.Match"]:
    """
    Return the first regex match among patterns.

    Args:
        patterns: Regular expressions, in priority order
        text: Text to search
        flags: Regex flags

    Returns:
        Match object or None
    """
    for pattern in patterns:
        match = re.search(pattern, text, flags)
        if match:
            return match
    return None


def slugify(value: str) -> str:
    """Lower-case identifier made of letters, digits and underscores."""
    slug = re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")
    return slug or "unknown"
