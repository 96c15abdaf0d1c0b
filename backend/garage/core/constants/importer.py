"""
Importer constants — CSV columns, batching, rate limiting.
"""

REQUIRED_COLUMNS: tuple[str, ...] = ("type", "year", "make", "model", "id")

# Shopify allows at most 25 metaobjects per bulk mutation
BATCH_SIZE: int = 25

# Pause between batches to stay under the Admin API rate limit
DELAY_BETWEEN_BATCHES: float = 0.5

# Grace period before a live import starts (Ctrl+C to cancel)
CONFIRMATION_DELAY_SECONDS: float = 5.0

# Maximum errors echoed in the import summary
MAX_REPORTED_ERRORS: int = 10

DEFAULT_EXPORT_FILENAME: str = "export-for-production.graphql"
