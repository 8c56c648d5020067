from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
    """
    Parse an expiry timestamp written by the AWS CLI.

    Accepts RFC 3339 text such as ``2099-01-01T00:00:00Z`` or
    ``2024-05-01T10:00:00.123+02:00`` and the older ``2019-11-14T04:43:20UTC``
    form. Naive values are taken as UTC.

    Args:
        value: The timestamp text

    Returns:
        datetime: A timezone-aware datetime

    Raises:
        ValueError: If the text is not a recognised timestamp
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith("UTC"):
        text = text[:-3] + "+00:00"
    elif text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    # fromisoformat before 3.11 only takes 3 or 6 fractional digits
    if "." in text:
        head, _, tail = text.partition(".")
        digits = ""
        while tail and tail[0].isdigit():
            digits, tail = digits + tail[0], tail[1:]
        text = f"{head}.{digits[:6].ljust(6, '0')}{tail}"

    parsed = datetime.fromisoformat(text.replace(" ", "T", 1))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
