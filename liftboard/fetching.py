from __future__ import annotations

import re
import time
from pathlib import Path
from urllib.parse import urljoin

import requests

from .errors import SourceUnavailable


TIMEOUT_SECONDS = 10
CACHE_BUSTER_PARAM = "cb"
_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


def is_url(location: str) -> bool:
    return bool(_URL_PATTERN.match(str(location or "").strip()))


def resolve_location(location: str, base: str) -> str:
    text = str(location or "").strip()
    if is_url(text):
        return text
    relative = text.lstrip("/")
    if is_url(base):
        return urljoin(base.rstrip("/") + "/", relative)
    return str(Path(base) / relative)


def cache_buster(now: float | None = None) -> str:
    moment = time.time() if now is None else now
    return str(int(moment * 1000))


def fetch_url_text(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: int = TIMEOUT_SECONDS,
    params: dict[str, str] | None = None,
) -> str:
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, params=params, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        raise SourceUnavailable(url, str(exc)) from exc
    if response.status_code != 200:
        raise SourceUnavailable(url, f"HTTP {response.status_code}")
    if "charset" not in response.headers.get("Content-Type", "").lower():
        return response.content.decode("utf-8-sig", errors="replace")
    return response.text


def fetch_text(
    location: str,
    *,
    session: requests.Session | None = None,
    timeout: int = TIMEOUT_SECONDS,
    now: float | None = None,
) -> str:
    if is_url(location):
        return fetch_url_text(
            location,
            session=session,
            timeout=timeout,
            params={CACHE_BUSTER_PARAM: cache_buster(now)},
        )

    path = Path(location)
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise SourceUnavailable(location, str(exc)) from exc
