from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import Settings
from .errors import NoDataSources
from .manifest import ManifestService
from .render import render_dashboard
from .sources import HttpManifestClient


logger = logging.getLogger(__name__)

EXIT_NO_DATA_SOURCES = 2


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve exercise data sources and render one dashboard cycle.")
    parser.add_argument(
        "--manifest-only",
        action="store_true",
        help="Print the exercise manifest instead of running a render cycle.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation for the printed payload.")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    manifest_service = ManifestService(settings)
    if args.manifest_only:
        print(json.dumps(manifest_service.get_manifest(), indent=args.indent))
        return 0

    if settings.manifest_url:
        fetch_manifest = HttpManifestClient(settings.manifest_url, timeout=settings.fetch_timeout_seconds)
    else:
        fetch_manifest = manifest_service.get_manifest

    try:
        payload = render_dashboard(settings, fetch_manifest=fetch_manifest)
    except NoDataSources as exc:
        logger.error("%s", exc)
        return EXIT_NO_DATA_SOURCES

    print(json.dumps(payload, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
