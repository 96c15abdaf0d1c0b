#!/usr/bin/env python3
"""
Vehicle metaobject bulk import.

USAGE
-----
    # Validate the CSV and write the production export script only:
    python scripts/import_vehicles.py vehicles.csv --dry-run

    # Live run (creates metaobjects in SHOPIFY_STORE_DOMAIN):
    python scripts/import_vehicles.py vehicles.csv

    # Skip the 5 second grace period and the definition step:
    python scripts/import_vehicles.py vehicles.csv --yes --skip-definition

The CSV needs the columns type, year, make, model, id (style is optional).
Credentials come from SHOPIFY_STORE_DOMAIN / SHOPIFY_ADMIN_API_TOKEN
(or a .env file).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from garage.container import get_import_service
from garage.core.config import settings
from garage.core.constants import importer as importer_constants
from garage.services.import_service import chunk, parse_vehicle_csv

logger = logging.getLogger("import_vehicles")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import vehicles from CSV into Shopify metaobjects")
    parser.add_argument("csv_path", help="Path to the vehicles CSV file")
    parser.add_argument("--dry-run", action="store_true", help="Parse and export only; create nothing")
    parser.add_argument("--yes", action="store_true", help="Start immediately without the grace period")
    parser.add_argument("--skip-definition", action="store_true", help="Do not create the metaobject definition")
    parser.add_argument(
        "--export-path",
        default=str(Path(__file__).resolve().parent / importer_constants.DEFAULT_EXPORT_FILENAME),
        help="Where to write the GraphQL export script",
    )
    parser.add_argument("--no-export", action="store_true", help="Do not write the GraphQL export script")
    return parser


async def run(args: argparse.Namespace) -> int:
    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        logger.error(f"File not found: {csv_path}")
        return 1

    logger.info("Vehicle Import Script")
    logger.info(f"Shop: {settings.shopify_store_domain}")
    logger.info(f"CSV File: {csv_path}")

    records, warnings = parse_vehicle_csv(csv_path)
    logger.info(f"✓ Parsed {len(records)} vehicles ({len(warnings)} rows skipped)")
    if records:
        logger.info("Sample vehicle:\n%s", json.dumps(records[0], indent=2))

    service = get_import_service()

    if not args.dry_run:
        if not settings.shopify_configured:
            logger.error("Missing required environment variables: SHOPIFY_STORE_DOMAIN, SHOPIFY_ADMIN_API_TOKEN")
            return 1

        batch_count = len(chunk(records, settings.import_batch_size))
        logger.info(f"Ready to import {len(records)} vehicles in {batch_count} batches")
        if not args.yes:
            logger.info(
                f"Press Ctrl+C to cancel, or wait {importer_constants.CONFIRMATION_DELAY_SECONDS:.0f} seconds to continue..."
            )
            await asyncio.sleep(importer_constants.CONFIRMATION_DELAY_SECONDS)

        if not args.skip_definition and not await service.ensure_definition():
            logger.error("Failed to create metaobject definition. Exiting.")
            return 1

        summary = await service.import_records(records)
        for line in summary.report_lines():
            logger.info(line)

    if not args.no_export:
        service.write_export_script(records, args.export_path)

    logger.info("✓ Import complete!")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Import cancelled")
        return 130


if __name__ == "__main__":
    sys.exit(main())
