"""
Vehicle import service — populates the catalog from a CSV file.

Handles:
- Parsing the CSV (quoted fields, BOM, lower-cased headers)
- Skipping rows with missing columns or required fields
- Creating the vehicle metaobject definition (once)
- Batched bulk creation with a pause between batches
- Writing a GraphQL export script for importing into a production store
"""
import asyncio
import csv
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple

from garage.clients.shopify_client import ShopifyClient
from garage.core.constants import catalog as catalog_constants
from garage.core.constants import importer as importer_constants
from garage.core.exceptions import GarageProxyException, ShopifyUserError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass
class ImportSummary:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def report_lines(self, max_errors: int = importer_constants.MAX_REPORTED_ERRORS) -> List[str]:
        lines = [
            "=" * 60,
            "IMPORT SUMMARY",
            "=" * 60,
            f"Total vehicles: {self.total}",
            f"✓ Successfully imported: {self.succeeded}",
            f"✗ Failed: {self.failed}",
        ]
        if self.errors:
            lines.append("")
            lines.append("Errors encountered:")
            for error in self.errors[:max_errors]:
                suffix = f" ({error['field']})" if error.get("field") else ""
                lines.append(f"  - {error.get('message')}{suffix}")
            if len(self.errors) > max_errors:
                lines.append(f"  ... and {len(self.errors) - max_errors} more errors")
        return lines


def parse_vehicle_csv(path: str | Path) -> Tuple[List[Dict[str, str]], List[str]]:
    """
    Read vehicles from a CSV file.

    Returns the valid records and one warning per skipped row. Row numbers
    in warnings are 1-based file lines, header included.
    """
    records: List[Dict[str, str]] = []
    warnings: List[str] = []

    with open(path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if not header:
            return records, warnings
        keys = [column.strip().lower() for column in header]
        logger.info("CSV headers: %s", keys)

        for row_number, row in enumerate(reader, start=2):
            if not any(value.strip() for value in row):
                continue
            if len(row) < len(keys):
                warnings.append(f"Row {row_number} has fewer columns than header, skipping")
                continue

            record = {key: (row[index] or "").strip() for index, key in enumerate(keys)}
            if all(record.get(column) for column in importer_constants.REQUIRED_COLUMNS):
                records.append(record)
            else:
                warnings.append(f"Row {row_number} missing required fields, skipping")

    for warning in warnings:
        logger.warning(warning)
    return records, warnings


def _slug(value: str) -> str:
    return _WHITESPACE.sub("-", value.strip().lower())


def build_handle(record: Dict[str, str]) -> str:
    """Metaobject handle: type-year-make-model-id."""
    return "-".join(
        [
            _slug(record["type"]),
            record["year"].strip(),
            _slug(record["make"]),
            _slug(record["model"]),
            record["id"].strip(),
        ]
    )


def build_metaobject_input(record: Dict[str, str], metaobject_type: str = catalog_constants.METAOBJECT_TYPE) -> Dict[str, Any]:
    return {
        "type": metaobject_type,
        "handle": build_handle(record),
        "fields": [
            {"key": catalog_constants.FIELD_CATEGORY, "value": record["type"]},
            {"key": catalog_constants.FIELD_YEAR, "value": record["year"]},
            {"key": catalog_constants.FIELD_MAKE, "value": record["make"]},
            {"key": catalog_constants.FIELD_MODEL, "value": record["model"]},
            {"key": catalog_constants.FIELD_STYLE, "value": record.get("style") or ""},
            {"key": catalog_constants.FIELD_VEHICLE_ID, "value": record["id"]},
        ],
    }


def chunk(records: List[Any], size: int) -> List[List[Any]]:
    return [records[i:i + size] for i in range(0, len(records), size)]


def _graphql_string(value: Any) -> str:
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_export_script(
    records: List[Dict[str, str]],
    batch_size: int = importer_constants.BATCH_SIZE,
    metaobject_type: str = catalog_constants.METAOBJECT_TYPE,
) -> str:
    """GraphQL document that recreates the catalog in another store via GraphiQL."""
    definition = catalog_constants.VEHICLE_DEFINITION
    lines = [
        "# Vehicle Metaobjects Export for Production",
        f"# Generated: {datetime.now(timezone.utc).isoformat()}",
        f"# Total Vehicles: {len(records)}",
        "#",
        "# To import into production:",
        "# 1. Run the CreateVehicleDefinition mutation once",
        "# 2. Run the CreateVehiclesBatch mutations in order",
        "",
        "# STEP 1: Create the metaobject definition (run once)",
        "mutation CreateVehicleDefinition {",
        "  metaobjectDefinitionCreate(definition: {",
        f"    name: {_graphql_string(definition['name'])}",
        f"    type: {_graphql_string(metaobject_type)}",
        "    fieldDefinitions: [",
    ]
    for field_def in definition["fieldDefinitions"]:
        lines.append(
            f"      {{ key: {_graphql_string(field_def['key'])}, name: {_graphql_string(field_def['name'])}, "
            f"type: {_graphql_string(field_def['type'])}, required: {str(field_def['required']).lower()} }}"
        )
    lines += [
        "    ]",
        "    access: { storefront: PUBLIC_READ }",
        "  }) {",
        "    metaobjectDefinition { id name type }",
        "    userErrors { field message }",
        "  }",
        "}",
    ]

    for batch_index, batch in enumerate(chunk(records, batch_size)):
        first = batch_index * batch_size + 1
        lines += [
            "",
            f"# BATCH {batch_index + 1} (Vehicles {first}-{first + len(batch) - 1})",
            f"mutation CreateVehiclesBatch{batch_index + 1} {{",
            "  metaobjectBulkCreate(",
            "    metaobjects: [",
        ]
        for record in batch:
            metaobject = build_metaobject_input(record, metaobject_type)
            lines += [
                "      {",
                f"        type: {_graphql_string(metaobject['type'])}",
                f"        handle: {_graphql_string(metaobject['handle'])}",
                "        fields: [",
            ]
            for metaobject_field in metaobject["fields"]:
                lines.append(
                    f"          {{ key: {_graphql_string(metaobject_field['key'])}, "
                    f"value: {_graphql_string(metaobject_field['value'])} }}"
                )
            lines += ["        ]", "      }"]
        lines += [
            "    ]",
            "  ) {",
            "    metaobjects { id handle }",
            "    userErrors { field message }",
            "  }",
            "}",
        ]

    return "\n".join(lines) + "\n"


class VehicleImportService:
    """Creates vehicle metaobjects in Shopify from parsed CSV records."""

    def __init__(
        self,
        client: ShopifyClient,
        metaobject_type: str = catalog_constants.METAOBJECT_TYPE,
        batch_size: int = importer_constants.BATCH_SIZE,
        batch_delay: float = importer_constants.DELAY_BETWEEN_BATCHES,
    ) -> None:
        self._client = client
        self._metaobject_type = metaobject_type
        self._batch_size = batch_size
        self._batch_delay = batch_delay

    async def ensure_definition(self) -> bool:
        """Create the vehicle metaobject definition. An existing one counts as success."""
        definition = dict(catalog_constants.VEHICLE_DEFINITION, type=self._metaobject_type)
        try:
            await self._client.create_metaobject_definition(definition)
        except ShopifyUserError as exc:
            messages = [str(error.get("message", "")) for error in exc.errors or []]
            if any("already exists" in message or "taken" in message for message in messages):
                logger.info("✓ Metaobject definition already exists, continuing...")
                return True
            logger.error("Error creating definition: %s", exc.errors)
            return False
        logger.info("✓ Metaobject definition created successfully")
        return True

    async def import_records(self, records: List[Dict[str, str]]) -> ImportSummary:
        """
        Create the records in batches. A failed batch is recorded in the
        summary and the import moves on to the next one.
        """
        summary = ImportSummary(total=len(records))
        batches = chunk(records, self._batch_size)
        logger.info(f"Importing {len(records)} vehicles in {len(batches)} batches of {self._batch_size}...")

        for batch_index, batch in enumerate(batches):
            batch_number = batch_index + 1
            logger.info(f"Processing batch {batch_number}/{len(batches)} ({len(batch)} vehicles)...")
            metaobjects = [build_metaobject_input(record, self._metaobject_type) for record in batch]

            try:
                await self._client.bulk_create_metaobjects(metaobjects)
            except ShopifyUserError as exc:
                logger.error(f"  ✗ Batch {batch_number} errors: {exc.errors}")
                summary.failed += len(batch)
                summary.errors.extend(exc.errors or [])
            except GarageProxyException as exc:
                logger.error(f"  ✗ Batch {batch_number} failed: {exc.message}")
                summary.failed += len(batch)
                summary.errors.append({"message": exc.message, "batch": batch_number})
            else:
                summary.succeeded += len(batch)
                logger.info(f"  ✓ Batch {batch_number} completed: {len(batch)} vehicles created")

            if batch_index < len(batches) - 1:
                await asyncio.sleep(self._batch_delay)

        return summary

    def write_export_script(self, records: List[Dict[str, str]], output_path: str | Path) -> Path:
        output = Path(output_path)
        output.write_text(
            render_export_script(records, self._batch_size, self._metaobject_type),
            encoding="utf-8",
        )
        logger.info(f"✓ GraphQL export script saved to: {output}")
        return output
