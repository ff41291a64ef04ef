"""CLI entry points for one-off data maintenance."""
from __future__ import annotations

import argparse
from typing import Callable, Sequence

from kriminalitas.models.base import Store
from kriminalitas.services.area_service import AreaService
from kriminalitas.spatial.area_importer import AreaImporter
from kriminalitas.utils.config import settings
from kriminalitas.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _import_areas(store: Store, args: argparse.Namespace) -> None:
    importer = AreaImporter(store, srid=settings.spatial.srid)
    result = importer.import_file(args.file, show_progress=not args.no_progress)
    logger.info(
        "Areas imported",
        file=args.file,
        inserted=result.inserted,
        skipped=result.skipped,
    )


def _refresh_area_stats(store: Store, args: argparse.Namespace) -> None:
    updated = AreaService(store).refresh_statistics()
    logger.info("Area statistics refreshed", areas=updated)


COMMANDS: dict[str, Callable[[Store, argparse.Namespace], None]] = {
    "import-areas": _import_areas,
    "refresh-area-stats": _refresh_area_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Kriminalitas data management CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_areas = subparsers.add_parser(
        "import-areas",
        help="Load area polygons from a GeoJSON FeatureCollection (existing ids are skipped)",
    )
    import_areas.add_argument(
        "--file",
        default=settings.spatial.areas_geojson,
        help="Path to the GeoJSON file (default: %(default)s)",
    )
    import_areas.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )

    subparsers.add_parser(
        "refresh-area-stats",
        help="Recount incidents per area and update the map colors",
    )

    return parser


def run(args: argparse.Namespace, store: Store) -> None:
    """Run one command against an already constructed store."""
    store.open()
    try:
        COMMANDS[args.command](store, args)
    finally:
        store.close()


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("cli", log_file=settings.logging.files.get("cli"))
    run(args, Store(settings.database))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
