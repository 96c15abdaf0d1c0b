"""
Catalog filtering for the garage picker.

A linear scan over the in-memory catalog on every keystroke; the catalog is
bounded (low thousands), so there is no index.
"""
from dataclasses import dataclass
from typing import List, Sequence

from garage.core.constants.widget import RESULT_LIMIT
from garage.schemas.catalog import CatalogItem


@dataclass(frozen=True)
class FilterResult:
    items: List[CatalogItem]
    total: int

    @property
    def truncated(self) -> bool:
        return len(self.items) < self.total


def matches(item: CatalogItem, query: str) -> bool:
    """Case-insensitive substring match over category, year, make, model and style."""
    needle = (query or "").strip().lower()
    return not needle or needle in item.search_text


def filter_catalog(catalog: Sequence[CatalogItem], query: str = "", limit: int = RESULT_LIMIT) -> FilterResult:
    found = [item for item in catalog if matches(item, query)]
    return FilterResult(items=found[:limit], total=len(found))
