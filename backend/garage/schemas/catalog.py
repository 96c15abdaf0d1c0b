"""
Catalog schemas — vehicle records and the catalog listing.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class CatalogItem(BaseModel):
    """One selectable vehicle. Immutable once fetched."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: Optional[str] = None
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    style: Optional[str] = None
    gid: Optional[str] = None
    handle: Optional[str] = None

    @property
    def label(self) -> str:
        return " ".join(str(part) for part in (self.year, self.make, self.model) if part not in (None, ""))

    @property
    def search_text(self) -> str:
        parts = (self.category, self.year, self.make, self.model, self.style)
        return " ".join("" if part is None else str(part) for part in parts).lower()


class CatalogListResponse(BaseModel):
    success: bool = True
    count: int
    items: List[CatalogItem]
