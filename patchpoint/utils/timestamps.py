"""Normalization of device and client supplied timestamps."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

# Unix seconds fit in 10 digits until the year 2286; anything longer is read as
# milliseconds. A 10-digit millisecond value (before 1970-04-27) is misread as
# seconds.
SECONDS_MAX_DIGITS = 10


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _digit_length(number: float) -> int:
    # Whole numbers are measured without a trailing ".0", so 1700000000.0 is seconds
    text = str(int(number)) if number.is_integer() else repr(number)
    return len(text)


def _parse_date_string(value: str) -> Optional[datetime]:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_timestamp(value: Any, now: Optional[datetime] = None) -> datetime:
    """
    Convert an incoming time value into a UTC datetime.

    Accepts None, Unix seconds, Unix milliseconds (numbers or numeric strings)
    and date strings (ISO 8601 or RFC 2822). Never raises: anything that cannot
    be interpreted falls back to ``now`` (server receipt time).

    Args:
        value: Raw timestamp from the request body
        now: Receipt time override, mainly for tests

    Returns:
        Timezone-aware UTC datetime
    """
    received_at = now or datetime.now(timezone.utc)

    if value is None or (isinstance(value, str) and not value.strip()):
        return received_at

    number = _to_number(value)
    if number is not None:
        millis = number * 1000 if _digit_length(number) <= SECONDS_MAX_DIGITS else number
        try:
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return received_at

    if isinstance(value, str):
        parsed = _parse_date_string(value)
        if parsed is not None:
            return parsed

    return received_at
