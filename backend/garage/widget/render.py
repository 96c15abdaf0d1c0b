"""
View models for the garage widget: badge, "my garage" chips, the catalog
list and the status line. Pure functions of GarageState; any UI toolkit can
draw them.
"""
from dataclasses import dataclass
from typing import List, Optional

from garage.core.constants.widget import RESULT_LIMIT
from garage.widget.filtering import filter_catalog
from garage.widget.state import GarageState, is_selected


@dataclass(frozen=True)
class BadgeView:
    count: int
    active: bool


@dataclass(frozen=True)
class ChipView:
    id: str
    label: str


@dataclass(frozen=True)
class SelectionView:
    count: int
    chips: List[ChipView]

    @property
    def empty(self) -> bool:
        return not self.chips


@dataclass(frozen=True)
class CatalogRowView:
    id: str
    label: str
    style: Optional[str]
    selected: bool


@dataclass(frozen=True)
class CatalogView:
    rows: List[CatalogRowView]
    loading: bool = False
    error: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class StatusView:
    message: Optional[str]
    is_error: bool
    indicator: Optional[str]
    save_status: str


@dataclass(frozen=True)
class WidgetView:
    is_open: bool
    badge: BadgeView
    selection: SelectionView
    catalog: CatalogView
    status: StatusView


def render_badge(state: GarageState) -> BadgeView:
    count = len(state.selection)
    return BadgeView(count=count, active=count > 0)


def render_selection(state: GarageState) -> SelectionView:
    chips = []
    for item_id in state.selection:
        item = state.items.get(item_id)
        # Ids loaded at boot have no record until the catalog arrives
        chips.append(ChipView(id=item_id, label=item.label if item and item.label else item_id))
    return SelectionView(count=len(chips), chips=chips)


def render_catalog(state: GarageState, limit: int = RESULT_LIMIT) -> CatalogView:
    if state.catalog is None:
        return CatalogView(rows=[], loading=state.catalog_loading, error=state.catalog_error)

    result = filter_catalog(state.catalog, state.query, limit)
    rows = [
        CatalogRowView(id=item.id, label=item.label, style=item.style, selected=is_selected(state, item.id))
        for item in result.items
    ]
    note = f"Showing {len(result.items)} of {result.total} results" if result.truncated else None
    return CatalogView(rows=rows, loading=state.catalog_loading, error=state.catalog_error, note=note)


def render_status(state: GarageState) -> StatusView:
    return StatusView(
        message=state.status_message,
        is_error=state.status_is_error,
        indicator=state.indicator,
        save_status=state.save_status.value,
    )


def render(state: GarageState, limit: int = RESULT_LIMIT) -> WidgetView:
    return WidgetView(
        is_open=state.is_open,
        badge=render_badge(state),
        selection=render_selection(state),
        catalog=render_catalog(state, limit),
        status=render_status(state),
    )
