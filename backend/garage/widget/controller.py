"""
Garage widget controller — optimistic selection with debounced, single-flight saves.

Lifecycle of a save:

    toggle ──► PENDING_SAVE ──(quiet period)──► SAVING ──► IDLE
                    ▲   │                           │
                    └───┘ (toggle re-arms timer)    └──► SAVE_FAILED ──(indicator hides)──► IDLE

- Every toggle cancels the armed timer and arms a new one, so a burst of
  toggles produces one save, fired after the last toggle.
- At most one save is in flight. A timer firing while a save is in flight
  is dropped.
- When a save succeeds and the selection has moved on since its snapshot
  with no timer armed, a follow-up save starts immediately.
- A failed save is not retried; the next toggle starts a fresh cycle.

Everything runs on one event loop; no locks are needed.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from garage.core.constants import widget as widget_constants
from garage.core.exceptions import GatewayError
from garage.schemas.catalog import CatalogItem
from garage.widget.events import Close, Open, Remove, SearchInput, Toggle
from garage.widget.render import WidgetView, render
from garage.widget.state import (
    GarageState,
    SaveStatus,
    cache_catalog_items,
    remove_item,
    replace_selection,
    set_status,
    toggle_item,
)

logger = logging.getLogger(__name__)


class GarageApi(Protocol):
    async def fetch_selection(self) -> List[str]: ...

    async def fetch_catalog(self) -> List[CatalogItem]: ...

    async def save_selection(self, identifiers: List[str]) -> List[str]: ...


class GarageController:
    def __init__(
        self,
        api: GarageApi,
        state: Optional[GarageState] = None,
        debounce_seconds: float = widget_constants.SAVE_DEBOUNCE_SECONDS,
        saved_indicator_seconds: float = widget_constants.SAVED_INDICATOR_SECONDS,
        failed_indicator_seconds: float = widget_constants.FAILED_INDICATOR_SECONDS,
        result_limit: int = widget_constants.RESULT_LIMIT,
    ) -> None:
        self._api = api
        self.state = state or GarageState()
        self._debounce_seconds = debounce_seconds
        self._saved_indicator_seconds = saved_indicator_seconds
        self._failed_indicator_seconds = failed_indicator_seconds
        self._result_limit = result_limit
        self._save_task: Optional[asyncio.Task] = None
        self._handlers: Dict[type, Callable[[Any], Optional[Awaitable[None]]]] = {
            Toggle: lambda event: self.toggle(event.item),
            Remove: lambda event: self.remove(event.item_id),
            SearchInput: lambda event: self.search(event.query),
            Open: lambda event: self.open(),
            Close: lambda event: self.close(),
        }

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def dispatch(self, event: Any) -> None:
        """Apply one user action to the state."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unknown garage event: {event!r}")
        result = handler(event)
        if result is not None:
            await result

    async def boot(self) -> None:
        """Load the saved garage. On failure the widget starts empty."""
        try:
            identifiers = await self._api.fetch_selection()
        except GatewayError as exc:
            logger.error("Error loading customer garage: %s", exc.message)
            replace_selection(self.state, [])
            set_status(self.state, f"✗ Error loading garage: {exc.message}", is_error=True)
            return

        replace_selection(self.state, identifiers)
        set_status(self.state, f"✓ Loaded {len(self.state.selection)} vehicles from garage")

    async def open(self) -> None:
        self.state.is_open = True
        if self.state.catalog is None:
            await self.load_catalog()

    def close(self) -> None:
        self.state.is_open = False

    def search(self, query: str) -> None:
        self.state.query = query

    async def load_catalog(self) -> None:
        """Fetch the catalog once; it stays cached for the session."""
        self.state.catalog_loading = True
        self.state.catalog_error = None
        try:
            catalog = await self._api.fetch_catalog()
        except GatewayError as exc:
            logger.error("Error loading vehicles: %s", exc.message)
            self.state.catalog_error = exc.message
            set_status(self.state, f"✗ Error loading vehicles: {exc.message}", is_error=True)
            return
        finally:
            self.state.catalog_loading = False

        self.state.catalog = catalog
        cache_catalog_items(self.state)
        set_status(self.state, f"✓ Loaded {len(catalog)} available vehicles")

    def toggle(self, item: CatalogItem) -> None:
        toggle_item(self.state, item)
        self._schedule_save()

    def remove(self, item_id: str) -> None:
        if remove_item(self.state, item_id):
            self._schedule_save()

    def view(self) -> WidgetView:
        return render(self.state, self._result_limit)

    async def settle(self) -> None:
        """Wait until no save is armed or in flight."""
        while self.state.pending_timer is not None or self._save_task is not None:
            if self._save_task is not None:
                await asyncio.wait({self._save_task})
            else:
                await asyncio.sleep(min(self._debounce_seconds, 0.05))

    # ------------------------------------------------------------------
    # Debounce and save
    # ------------------------------------------------------------------

    def _schedule_save(self) -> None:
        if self.state.pending_timer is not None:
            self.state.pending_timer.cancel()
        loop = asyncio.get_running_loop()
        self.state.pending_timer = loop.call_later(self._debounce_seconds, self._on_debounce_fired)
        # An in-flight save keeps SAVING; its completion hands over to the armed timer
        if not self.state.is_saving:
            self.state.save_status = SaveStatus.PENDING_SAVE
        self._show_indicator(widget_constants.INDICATOR_SAVING)

    def _on_debounce_fired(self) -> None:
        self.state.pending_timer = None
        if self.state.is_saving:
            logger.debug("garage save already in flight; debounce fire dropped")
            return
        self._start_save()

    def _start_save(self) -> None:
        snapshot = list(self.state.selection)
        self.state.is_saving = True
        self.state.save_status = SaveStatus.SAVING
        self._save_task = asyncio.get_running_loop().create_task(self._save(snapshot))

    async def _save(self, snapshot: List[str]) -> None:
        succeeded = False
        try:
            await self._api.save_selection(snapshot)
        except GatewayError as exc:
            logger.error("Error auto-saving garage: %s", exc.message)
            self._mark_save_failed(exc.message)
        except Exception as exc:
            # Nobody awaits the save task, so every failure must land in SAVE_FAILED
            logger.exception("Unexpected error auto-saving garage")
            self._mark_save_failed(str(exc) or type(exc).__name__)
        else:
            succeeded = True
            self.state.save_status = SaveStatus.PENDING_SAVE if self.state.pending_timer else SaveStatus.IDLE
            set_status(self.state, f"✓ Garage auto-saved ({len(snapshot)} vehicles)")
            self._show_indicator(widget_constants.INDICATOR_SAVED, self._saved_indicator_seconds)
        finally:
            self.state.is_saving = False
            self._save_task = None

        if succeeded and self.state.pending_timer is None and self.state.selection != snapshot:
            logger.info("garage changed during save; saving again")
            self._start_save()

    def _mark_save_failed(self, message: str) -> None:
        self.state.save_status = SaveStatus.SAVE_FAILED
        set_status(self.state, f"✗ Error saving garage: {message}", is_error=True)
        self._show_indicator(widget_constants.INDICATOR_FAILED, self._failed_indicator_seconds)

    # ------------------------------------------------------------------
    # Indicator
    # ------------------------------------------------------------------

    def _show_indicator(self, text: str, hide_after: Optional[float] = None) -> None:
        if self.state.indicator_timer is not None:
            self.state.indicator_timer.cancel()
            self.state.indicator_timer = None
        self.state.indicator = text
        if hide_after is not None:
            loop = asyncio.get_running_loop()
            self.state.indicator_timer = loop.call_later(hide_after, self._hide_indicator)

    def _hide_indicator(self) -> None:
        self.state.indicator = None
        self.state.indicator_timer = None
        if self.state.save_status == SaveStatus.SAVE_FAILED:
            self.state.save_status = SaveStatus.PENDING_SAVE if self.state.pending_timer else SaveStatus.IDLE
