from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Flask, send_from_directory

from .config import Settings
from .errors import NoDataSources
from .manifest import ManifestService
from .render import render_dashboard
from .sources import HttpManifestClient, ManifestFetcher


logger = logging.getLogger(__name__)

app = Flask(__name__, static_folder=None)
settings = Settings.from_env()
manifest_service = ManifestService(settings)


def _manifest_fetcher() -> ManifestFetcher:
    if settings.manifest_url:
        return HttpManifestClient(settings.manifest_url, timeout=settings.fetch_timeout_seconds)
    return manifest_service.get_manifest


@app.get("/health")
def health() -> tuple[dict, int]:
    return (
        {
            "status": "ok",
            "time_utc": datetime.now(timezone.utc).isoformat(),
            "data_dir_exists": settings.data_dir.is_dir(),
        },
        200,
    )


@app.get("/api/exercises")
def exercises_get():
    try:
        return manifest_service.get_manifest(), 200
    except Exception:
        logger.exception("Failed to build exercises manifest.")
        return {"error": "failed to list exercises"}, 500


@app.get("/api/dashboard")
def dashboard_get() -> tuple[dict, int]:
    try:
        payload = render_dashboard(settings, fetch_manifest=_manifest_fetcher())
    except NoDataSources as exc:
        logger.error("Render cycle has no data sources: %s", exc)
        return {"status": "error", "error": str(exc)}, 503
    return payload, 200


@app.get("/")
def index_page():
    return send_from_directory(settings.data_dir, settings.index_html_file.name)


@app.get("/<path:filename>")
def static_file(filename: str):
    return send_from_directory(settings.data_dir, filename)


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    logger.info("Server listening on http://localhost:%s", settings.api_port)
    app.run(host="0.0.0.0", port=settings.api_port)


if __name__ == "__main__":
    main()
