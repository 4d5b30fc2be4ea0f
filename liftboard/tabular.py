from __future__ import annotations

import csv
import io
import logging
from typing import Callable

from .errors import SourceUnavailable
from .fetching import fetch_text
from .models import RawRow


logger = logging.getLogger(__name__)

TextFetcher = Callable[[str], str]


def _is_blank_record(record: list[str]) -> bool:
    return all(not cell.strip() for cell in record)


BOM = "\ufeff"


def parse_rows(text: str) -> list[RawRow]:
    reader = csv.reader(io.StringIO(text.removeprefix(BOM)))
    header: list[str] | None = None
    rows: list[RawRow] = []
    for record in reader:
        if not record or _is_blank_record(record):
            continue
        if header is None:
            header = record
            continue
        row: RawRow = {}
        for name, cell in zip(header, record):
            if not name:
                continue
            row[name] = cell
        rows.append(row)
    return rows


def load_rows(location: str, fetch: TextFetcher = fetch_text) -> list[RawRow] | None:
    try:
        text = fetch(location)
    except SourceUnavailable as exc:
        logger.warning("Tabular source unavailable %s: %s", location, exc.reason)
        return None

    try:
        return parse_rows(text)
    except csv.Error as exc:
        logger.warning("Tabular parse error for %s: %s", location, exc)
        return None
