"""
Constants package — re-exports from domain-specific modules.

Usage:
    from garage.core.constants.catalog import PAGE_SIZE
    # or import everything:
    from garage.core.constants import catalog, profile, widget, importer
"""

from garage.core.constants import catalog, profile, widget, importer
from garage.core.constants.catalog import (
    METAOBJECT_TYPE,
    PAGE_SIZE,
    MAX_PAGES,
    VEHICLE_DEFINITION,
)
from garage.core.constants.profile import (
    CUSTOMER_GID_PREFIX,
    METAFIELD_NAMESPACE,
    METAFIELD_KEY,
    METAFIELD_TYPE,
)
from garage.core.constants.widget import (
    SAVE_DEBOUNCE_SECONDS,
    RESULT_LIMIT,
)
from garage.core.constants.importer import (
    REQUIRED_COLUMNS,
    BATCH_SIZE,
    DELAY_BETWEEN_BATCHES,
)
