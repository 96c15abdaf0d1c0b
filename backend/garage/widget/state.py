"""
Garage widget state container and the pure transitions on it.

One GarageState is constructed per widget session and owned by a single
GarageController; render functions receive it explicitly.
"""
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from garage.schemas.catalog import CatalogItem


class SaveStatus(str, Enum):
    IDLE = "idle"
    PENDING_SAVE = "pending_save"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"


@dataclass
class GarageState:
    # Selected vehicle ids in insertion order; this is what gets persisted
    selection: List[str] = field(default_factory=list)
    # Full records for selected ids, kept so chips render without a refetch
    items: Dict[str, CatalogItem] = field(default_factory=dict)

    catalog: Optional[List[CatalogItem]] = None
    catalog_loading: bool = False
    catalog_error: Optional[str] = None
    query: str = ""
    is_open: bool = False

    save_status: SaveStatus = SaveStatus.IDLE
    pending_timer: Optional[asyncio.TimerHandle] = None
    is_saving: bool = False

    status_message: Optional[str] = None
    status_is_error: bool = False
    indicator: Optional[str] = None
    indicator_timer: Optional[asyncio.TimerHandle] = None


def is_selected(state: GarageState, item_id: str) -> bool:
    return item_id in state.selection


def add_item(state: GarageState, item: CatalogItem) -> bool:
    if is_selected(state, item.id):
        return False
    state.selection.append(item.id)
    state.items[item.id] = item
    return True


def remove_item(state: GarageState, item_id: str) -> bool:
    if not is_selected(state, item_id):
        return False
    state.selection.remove(item_id)
    state.items.pop(item_id, None)
    return True


def toggle_item(state: GarageState, item: CatalogItem) -> bool:
    """Remove the item if selected, add it otherwise. Returns True when added."""
    if remove_item(state, item.id):
        return False
    return add_item(state, item)


def replace_selection(state: GarageState, identifiers: List[str]) -> None:
    seen = set()
    unique: List[str] = []
    for identifier in identifiers:
        if identifier not in seen:
            seen.add(identifier)
            unique.append(identifier)
    state.selection = unique
    state.items = {i: item for i, item in state.items.items() if i in seen}
    if state.catalog:
        cache_catalog_items(state)


def cache_catalog_items(state: GarageState) -> None:
    """Fill the record cache for selected ids from the loaded catalog."""
    by_id = {item.id: item for item in state.catalog or []}
    for item_id in state.selection:
        if item_id in by_id:
            state.items[item_id] = by_id[item_id]


def set_status(state: GarageState, message: str, is_error: bool = False) -> None:
    state.status_message = message
    state.status_is_error = is_error
