from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

import requests

from .config import Settings
from .errors import NoDataSources
from .fetching import TIMEOUT_SECONDS, resolve_location
from .models import InlineMeta, ManifestEntry, RawRow, SourceDescriptor
from .normalizer import normalize_rows
from .presentation import SectionIndex


logger = logging.getLogger(__name__)

DATA_FILE_SUFFIX = ".csv"

ManifestFetcher = Callable[[], "list[Any] | None"]
RowLoader = Callable[[str], "list[RawRow] | None"]
SourceStrategy = Callable[[], "list[SourceDescriptor] | None"]


class HttpManifestClient:
    def __init__(self, url: str, *, session: requests.Session | None = None, timeout: int = TIMEOUT_SECONDS):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def __call__(self) -> list[Any] | None:
        try:
            response = self.session.get(
                self.url,
                headers={"Cache-Control": "no-store"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.info("Manifest service unavailable at %s: %s", self.url, exc)
            return None
        if not response.ok:
            logger.info("Manifest service at %s answered HTTP %s", self.url, response.status_code)
            return None
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Manifest service at %s returned invalid JSON.", self.url)
            return None
        if not isinstance(payload, list):
            return None
        logger.debug("Fetched manifest with %s entries from %s", len(payload), self.url)
        return payload


def _located(location: str, base: str | None) -> str:
    return resolve_location(location, base) if base else location


def default_location(key: str) -> str:
    return f"{key}{DATA_FILE_SUFFIX}"


def descriptor_from_manifest(item: object, *, base: str | None = None) -> SourceDescriptor | None:
    if not isinstance(item, dict):
        return None
    entry = ManifestEntry.from_dict(item)
    if entry is None:
        return None
    location = entry.url or entry.file or default_location(entry.key)
    inline_meta = None
    if entry.label or entry.units:
        inline_meta = InlineMeta(label=entry.label, units=entry.units)
    return SourceDescriptor(key=entry.key, fetch_location=_located(location, base), inline_meta=inline_meta)


def manifest_strategy(fetch_manifest: ManifestFetcher, *, base: str | None = None) -> SourceStrategy:
    def resolve() -> list[SourceDescriptor] | None:
        manifest = fetch_manifest()
        if not isinstance(manifest, list) or not manifest:
            return None
        descriptors = []
        for item in manifest:
            descriptor = descriptor_from_manifest(item, base=base)
            if descriptor is None:
                logger.warning("Ignoring manifest entry without a key: %r", item)
                continue
            descriptors.append(descriptor)
        return descriptors or None

    return resolve


def presentation_strategy(sections: SectionIndex, *, base: str | None = None) -> SourceStrategy:
    def resolve() -> list[SourceDescriptor] | None:
        keys = sections.keys()
        if not keys:
            return None
        return [SourceDescriptor(key=key, fetch_location=_located(default_location(key), base)) for key in keys]

    return resolve


def combined_file_strategy(location: str, load: RowLoader) -> SourceStrategy:
    def resolve() -> list[SourceDescriptor] | None:
        rows = load(location)
        if not rows:
            return None
        keys: list[str] = []
        for exercise, _point in normalize_rows(rows):
            if exercise not in keys:
                keys.append(exercise)
        return [SourceDescriptor(key=key, fetch_location=location) for key in keys] or None

    return resolve


def resolve_sources(strategies: Iterable[SourceStrategy]) -> list[SourceDescriptor]:
    for strategy in strategies:
        descriptors = strategy()
        if descriptors:
            return list(descriptors)
    raise NoDataSources(
        "No exercise sections found and no manifest available. Add sections to the dashboard page or run the server."
    )


def default_strategies(
    settings: Settings,
    *,
    fetch_manifest: ManifestFetcher,
    sections: SectionIndex,
    load: RowLoader,
) -> list[SourceStrategy]:
    strategies = [
        manifest_strategy(fetch_manifest, base=settings.data_base),
        presentation_strategy(sections, base=settings.data_base),
    ]
    if settings.combined_data_file:
        strategies.append(
            combined_file_strategy(resolve_location(settings.combined_data_file, settings.data_base), load)
        )
    return strategies
