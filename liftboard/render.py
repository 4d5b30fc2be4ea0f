from __future__ import annotations

import concurrent.futures
import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any

from .config import Settings
from .fetching import fetch_text
from .metadata import resolve_meta
from .models import ExerciseEntry, SourceDescriptor
from .normalizer import normalize_rows, rows_for_exercise
from .presentation import SectionIndex
from .series import group_by_exercise
from .sources import ManifestFetcher, RowLoader, default_strategies, resolve_sources
from .tabular import load_rows
from .video import embed_url_for_series


logger = logging.getLogger(__name__)


def default_row_loader(settings: Settings) -> RowLoader:
    return partial(load_rows, fetch=partial(fetch_text, timeout=settings.fetch_timeout_seconds))


def run_exercise_pipeline(
    descriptor: SourceDescriptor,
    *,
    load: RowLoader,
    display_label: str | None = None,
) -> ExerciseEntry:
    key = descriptor.key
    logger.debug("Fetching rows for key=%s location=%s", key, descriptor.fetch_location)
    rows = load(descriptor.fetch_location)
    if rows:
        grouped = group_by_exercise(normalize_rows(rows))
        logger.debug("Grouped rows for key=%s groups=%s", key, list(grouped.keys()))
    else:
        grouped = {}
    series = grouped.get(key, [])

    meta = resolve_meta(
        key,
        descriptor_meta=descriptor.inline_meta,
        rows=rows_for_exercise(rows or [], key),
        display_label=display_label,
    )
    logger.debug("Rendering key=%s label=%r units=%r points=%s", key, meta.label, meta.units, len(series))
    return ExerciseEntry(
        key=key,
        display_label=meta.label,
        display_units=meta.units,
        labels=[point.timestamp for point in series],
        values=[point.value for point in series],
        embed_url=embed_url_for_series(series, key=key),
    )


def _empty_entry(descriptor: SourceDescriptor, display_label: str | None) -> ExerciseEntry:
    meta = resolve_meta(descriptor.key, descriptor_meta=descriptor.inline_meta, display_label=display_label)
    return ExerciseEntry(key=descriptor.key, display_label=meta.label, display_units=meta.units)


def _isolated_pipeline(
    descriptor: SourceDescriptor,
    load: RowLoader,
    display_label: str | None,
) -> ExerciseEntry:
    try:
        return run_exercise_pipeline(descriptor, load=load, display_label=display_label)
    except Exception:
        logger.exception("Pipeline failed for key=%s; rendering an empty series.", descriptor.key)
        return _empty_entry(descriptor, display_label)


def run_render_cycle(
    descriptors: list[SourceDescriptor],
    *,
    load: RowLoader,
    display_labels: dict[str, str | None] | None = None,
    max_workers: int = 4,
) -> list[ExerciseEntry]:
    if not descriptors:
        return []
    labels = display_labels or {}
    workers = max(1, min(max_workers, len(descriptors)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render") as executor:
        futures = [
            executor.submit(_isolated_pipeline, descriptor, load, labels.get(descriptor.key))
            for descriptor in descriptors
        ]
        concurrent.futures.wait(futures)
    return [future.result() for future in futures]


def render_dashboard(
    settings: Settings,
    *,
    fetch_manifest: ManifestFetcher,
    sections: SectionIndex | None = None,
    load: RowLoader | None = None,
) -> dict[str, Any]:
    section_index = sections if sections is not None else SectionIndex.from_file(settings.index_html_file)
    row_loader = load or default_row_loader(settings)

    descriptors = resolve_sources(
        default_strategies(
            settings,
            fetch_manifest=fetch_manifest,
            sections=section_index,
            load=row_loader,
        )
    )
    logger.info("Render cycle resolved %s exercise source(s).", len(descriptors))

    entries = run_render_cycle(
        descriptors,
        load=row_loader,
        display_labels=section_index.labels(),
        max_workers=settings.render_workers,
    )
    return {
        "status": "ok",
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "exercises": [entry.to_dict() for entry in entries],
    }
