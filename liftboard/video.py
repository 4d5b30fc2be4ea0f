from __future__ import annotations

import logging
import re
from typing import Iterable
from urllib.parse import parse_qs, urlsplit

from .models import DataPoint


logger = logging.getLogger(__name__)

EMBED_URL_TEMPLATE = "https://www.youtube.com/embed/{video_id}"
SHORT_LINK_HOSTS = {"youtu.be", "www.youtu.be"}
VIDEO_HOST_DOMAINS = ("youtube.com", "youtube-nocookie.com")
_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def _embed(video_id: str) -> str:
    return EMBED_URL_TEMPLATE.format(video_id=video_id)


def _is_video_host(host: str) -> bool:
    return any(host == domain or host.endswith(f".{domain}") for domain in VIDEO_HOST_DOMAINS)


def to_embed_url(raw: object) -> str | None:
    if not isinstance(raw, str):
        return None
    link = raw.strip()
    if not link:
        return None
    if not _SCHEME_PATTERN.match(link):
        return None

    try:
        parts = urlsplit(link)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    if not host:
        return None

    if host in SHORT_LINK_HOSTS:
        video_id = parts.path.lstrip("/").split("/")[0]
        return _embed(video_id) if video_id else None

    if _is_video_host(host):
        query_ids = parse_qs(parts.query).get("v") or []
        video_id = next((item for item in query_ids if item), None)
        if video_id:
            return _embed(video_id)
        segments = [segment for segment in parts.path.split("/") if segment]
        if segments:
            return _embed(segments[-1])

    return None


def latest_video_ref(series: Iterable[DataPoint]) -> str | None:
    for point in reversed(list(series)):
        if point.video_ref and point.video_ref.strip():
            return point.video_ref
    return None


def embed_url_for_series(series: Iterable[DataPoint], *, key: str = "") -> str | None:
    raw = latest_video_ref(series)
    embed = to_embed_url(raw)
    if raw and embed is None:
        logger.info("Clearing video for key=%s; unresolvable link %r", key, raw)
    elif embed:
        logger.debug("Video for key=%s resolved to %s (from %s)", key, embed, raw)
    return embed
