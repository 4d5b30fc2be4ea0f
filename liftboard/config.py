from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv


load_dotenv()


EnvGetter = Callable[[str], str | None]

DEFAULT_DATA_DIR = "public"
DEFAULT_INDEX_HTML_FILE = "index.html"
DEFAULT_CACHE_TTL_SECONDS = 60
DEFAULT_FETCH_TIMEOUT_SECONDS = 10
DEFAULT_RENDER_WORKERS = 4
DEFAULT_API_PORT = 3000


def _str_env(*names: str, default: str = "", getenv: EnvGetter = os.getenv) -> str:
    for name in names:
        value = getenv(name)
        if value is not None:
            return value.strip()
    return default


def _optional_str_env(*names: str, getenv: EnvGetter = os.getenv) -> str | None:
    value = _str_env(*names, default="", getenv=getenv)
    return value or None


def _int_env(
    name: str,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
    *,
    getenv: EnvGetter = os.getenv,
) -> int:
    value = getenv(name)
    if value is None:
        parsed = default
    else:
        try:
            parsed = int(value.strip())
        except ValueError:
            parsed = default

    if minimum is not None and parsed < minimum:
        parsed = minimum
    if maximum is not None and parsed > maximum:
        parsed = maximum
    return parsed


def _cache_ttl_seconds(getenv: EnvGetter) -> int:
    if getenv("CACHE_TTL_SECONDS") is not None:
        return _int_env("CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS, minimum=0, maximum=86400, getenv=getenv)

    legacy_ms = getenv("CACHE_TTL_MS")
    if legacy_ms is None:
        return DEFAULT_CACHE_TTL_SECONDS
    try:
        parsed = int(legacy_ms.strip()) // 1000
    except ValueError:
        return DEFAULT_CACHE_TTL_SECONDS
    return max(0, min(parsed, 86400))


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    index_html_file: Path
    data_base: str
    manifest_url: str | None
    gdrive_folder_id: str | None
    combined_data_file: str | None

    cache_ttl_seconds: int
    fetch_timeout_seconds: int
    render_workers: int
    api_port: int
    log_level: str

    @classmethod
    def from_env(cls, getenv: EnvGetter = os.getenv) -> "Settings":
        data_dir = Path(_str_env("DATA_DIR", default=DEFAULT_DATA_DIR, getenv=getenv) or DEFAULT_DATA_DIR).resolve()
        index_name = _str_env("INDEX_HTML_FILE", default=DEFAULT_INDEX_HTML_FILE, getenv=getenv)
        index_html_file = data_dir / (index_name or DEFAULT_INDEX_HTML_FILE)

        return cls(
            data_dir=data_dir,
            index_html_file=index_html_file,
            data_base=_optional_str_env("DATA_BASE_URL", getenv=getenv) or str(data_dir),
            manifest_url=_optional_str_env("MANIFEST_URL", getenv=getenv),
            gdrive_folder_id=_optional_str_env("GDRIVE_FOLDER_ID", getenv=getenv),
            combined_data_file=_optional_str_env("COMBINED_DATA_FILE", getenv=getenv),
            cache_ttl_seconds=_cache_ttl_seconds(getenv),
            fetch_timeout_seconds=_int_env(
                "FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT_SECONDS, minimum=1, maximum=120, getenv=getenv
            ),
            render_workers=_int_env("RENDER_WORKERS", DEFAULT_RENDER_WORKERS, minimum=1, maximum=32, getenv=getenv),
            api_port=_int_env(
                "API_PORT" if getenv("API_PORT") is not None else "PORT",
                DEFAULT_API_PORT,
                minimum=1,
                maximum=65535,
                getenv=getenv,
            ),
            log_level=_str_env("LOG_LEVEL", default="INFO", getenv=getenv).upper() or "INFO",
        )
