from __future__ import annotations

import csv
import logging
import re
from typing import Callable

import requests

from .errors import SourceUnavailable
from .fetching import TIMEOUT_SECONDS, fetch_url_text
from .metadata import extract_inline_meta
from .models import ManifestEntry
from .tabular import parse_rows


logger = logging.getLogger(__name__)

FOLDER_URL_TEMPLATE = "https://drive.google.com/drive/folders/{folder_id}"
SHEET_EXPORT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{file_id}/export?format=csv&gid=0"
DOWNLOAD_URL_TEMPLATE = "https://drive.google.com/uc?export=download&id={file_id}"

_FILE_LINK_PATTERN = re.compile(r"/file/d/([a-zA-Z0-9_-]{10,})/[^\"'<>]*")
_TITLE_ID_PATTERN = re.compile(r"\"title\":\s*\"([^\"]+)\",\s*\"id\":\s*\"([a-zA-Z0-9_-]{10,})\"")
_WHITESPACE_PATTERN = re.compile(r"\s+")

UrlFetcher = Callable[[str], str]


class DriveClient:
    def __init__(self, *, session: requests.Session | None = None, timeout: int = TIMEOUT_SECONDS):
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        return fetch_url_text(url, session=self.session, timeout=self.timeout)


def parse_folder_listing(html_text: str) -> list[dict[str, str]]:
    entries: list[dict[str, str]] = []
    by_id: dict[str, dict[str, str]] = {}

    for match in _FILE_LINK_PATTERN.finditer(html_text):
        file_id = match.group(1)
        if file_id in by_id:
            continue
        entry = {"id": file_id}
        by_id[file_id] = entry
        entries.append(entry)

    for match in _TITLE_ID_PATTERN.finditer(html_text):
        name, file_id = match.group(1), match.group(2)
        existing = by_id.get(file_id)
        if existing is None:
            entry = {"id": file_id, "name": name}
            by_id[file_id] = entry
            entries.append(entry)
        elif not existing.get("name"):
            existing["name"] = name

    return entries


def list_public_folder(folder_id: str, fetch: UrlFetcher) -> list[dict[str, str]]:
    return parse_folder_listing(fetch(FOLDER_URL_TEMPLATE.format(folder_id=folder_id)))


def sheet_export_url(file_id: str) -> str:
    return SHEET_EXPORT_URL_TEMPLATE.format(file_id=file_id)


def fetch_csv_export(file_id: str, fetch: UrlFetcher) -> str:
    try:
        return fetch(sheet_export_url(file_id))
    except SourceUnavailable as exc:
        try:
            return fetch(DOWNLOAD_URL_TEMPLATE.format(file_id=file_id))
        except SourceUnavailable:
            raise exc


def exercise_key_for(entry: dict[str, str]) -> str:
    name = str(entry.get("name") or "").strip()
    if name:
        return _WHITESPACE_PATTERN.sub("_", name).lower()
    return str(entry["id"])


def build_exercises_from_drive(folder_id: str, fetch: UrlFetcher) -> list[ManifestEntry]:
    exercises: list[ManifestEntry] = []
    for entry in list_public_folder(folder_id, fetch):
        file_id = entry["id"]
        try:
            rows = parse_rows(fetch_csv_export(file_id, fetch))
        except SourceUnavailable as exc:
            logger.warning("Skipping drive file %s - failed to fetch: %s", file_id, exc.reason)
            continue
        except csv.Error as exc:
            logger.warning("Skipping drive file %s - failed to parse: %s", file_id, exc)
            continue
        meta = extract_inline_meta(rows)
        exercises.append(
            ManifestEntry(
                key=exercise_key_for(entry),
                file=f"{file_id}.csv",
                url=sheet_export_url(file_id),
                label=meta.label,
                units=meta.units,
            )
        )
    return exercises
