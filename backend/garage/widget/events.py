"""
User actions on the garage widget, dispatched by GarageController.dispatch.
"""
from dataclasses import dataclass

from garage.schemas.catalog import CatalogItem


@dataclass(frozen=True)
class Toggle:
    item: CatalogItem


@dataclass(frozen=True)
class Remove:
    item_id: str


@dataclass(frozen=True)
class SearchInput:
    query: str


@dataclass(frozen=True)
class Open:
    pass


@dataclass(frozen=True)
class Close:
    pass
