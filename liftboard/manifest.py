from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

from .cache import TtlCache
from .config import Settings
from .drive import DriveClient, build_exercises_from_drive
from .metadata import extract_inline_meta
from .models import ManifestEntry
from .tabular import parse_rows


logger = logging.getLogger(__name__)

DATA_FILE_SUFFIX = ".csv"


def build_exercises_from_local(data_dir: Path) -> list[ManifestEntry]:
    try:
        candidates = sorted(path for path in data_dir.iterdir() if path.name.lower().endswith(DATA_FILE_SUFFIX))
    except OSError as exc:
        logger.warning("Unable to list data directory %s: %s", data_dir, exc)
        return []

    exercises: list[ManifestEntry] = []
    for path in candidates:
        if not path.is_file():
            continue
        try:
            rows = parse_rows(path.read_text(encoding="utf-8-sig"))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.warning("Skipping local file %s: %s", path.name, exc)
            continue
        meta = extract_inline_meta(rows)
        exercises.append(
            ManifestEntry(
                key=path.name[: -len(DATA_FILE_SUFFIX)],
                file=path.name,
                url=f"/{path.name}",
                label=meta.label,
                units=meta.units,
            )
        )
    return exercises


def build_manifest(settings: Settings, *, drive_client: DriveClient | None = None) -> list[ManifestEntry]:
    folder_id = settings.gdrive_folder_id
    if not folder_id:
        return build_exercises_from_local(settings.data_dir)

    client = drive_client or DriveClient(timeout=settings.fetch_timeout_seconds)
    try:
        return build_exercises_from_drive(folder_id, client.fetch)
    except Exception:
        logger.exception("Drive folder listing failed; falling back to local data files.")
        return build_exercises_from_local(settings.data_dir)


class ManifestService:
    def __init__(
        self,
        settings: Settings,
        *,
        cache: TtlCache | None = None,
        drive_client: DriveClient | None = None,
    ):
        self.settings = settings
        self.cache = cache or TtlCache(settings.cache_ttl_seconds)
        self.drive_client = drive_client

    def entries(self) -> list[ManifestEntry]:
        return self.cache.get_or_load(lambda: build_manifest(self.settings, drive_client=self.drive_client))

    def get_manifest(self) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries()]
