from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from dateutil import parser as date_parser

from .models import DataPoint, Series


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(raw: str) -> datetime | None:
    text = str(raw or "").strip()
    if not text:
        return None
    try:
        parsed = date_parser.parse(text)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def timestamp_sort_key(raw: str) -> tuple[int, datetime]:
    """Parsable timestamps order chronologically; unparsable ones sort after all of them."""
    parsed = parse_timestamp(raw)
    if parsed is None:
        return (1, _EPOCH)
    return (0, parsed)


def sort_series(points: Iterable[DataPoint]) -> Series:
    return sorted(points, key=lambda point: timestamp_sort_key(point.timestamp))


def group_by_exercise(tagged: Iterable[tuple[str, DataPoint]]) -> dict[str, Series]:
    buckets: dict[str, Series] = {}
    for key, point in tagged:
        buckets.setdefault(key, []).append(point)
    return {key: sort_series(points) for key, points in buckets.items()}
