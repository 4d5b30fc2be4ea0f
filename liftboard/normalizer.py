from __future__ import annotations

import math
from typing import Iterable

from .models import DataPoint, RawRow


EXERCISE_COLUMN = "exercise"
VALUE_COLUMN = "value"
TIMESTAMP_COLUMNS = ("ts", "date", "timestamp")
VIDEO_COLUMNS = ("youtubeId", "youtubeID", "youtube")


def _cell(row: RawRow, name: str) -> str:
    value = row.get(name)
    if value is None:
        return ""
    return str(value).strip()


def first_present(row: RawRow, names: Iterable[str]) -> str | None:
    for name in names:
        value = _cell(row, name)
        if value:
            return value
    return None


def parse_value(raw: object) -> float | None:
    text = str(raw or "").strip()
    # float() accepts "1_000"
    if not text or "_" in text:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def normalize_row(row: RawRow) -> tuple[str, DataPoint] | None:
    exercise = _cell(row, EXERCISE_COLUMN)
    if not exercise:
        return None

    timestamp = first_present(row, TIMESTAMP_COLUMNS)
    if timestamp is None:
        return None

    value = parse_value(row.get(VALUE_COLUMN))
    if value is None:
        return None

    video_ref = first_present(row, VIDEO_COLUMNS)
    return exercise, DataPoint(timestamp=timestamp, value=value, video_ref=video_ref)


def normalize_rows(rows: Iterable[RawRow]) -> list[tuple[str, DataPoint]]:
    normalized: list[tuple[str, DataPoint]] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        result = normalize_row(row)
        if result is not None:
            normalized.append(result)
    return normalized


def points_for_exercise(rows: Iterable[RawRow], key: str) -> list[DataPoint]:
    return [point for exercise, point in normalize_rows(rows) if exercise == key]


def rows_for_exercise(rows: Iterable[RawRow], key: str) -> list[RawRow]:
    return [row for row in rows if isinstance(row, dict) and _cell(row, EXERCISE_COLUMN) == key]
