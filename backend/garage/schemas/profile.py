"""
Profile schemas — the customer's saved garage.
"""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from .catalog import CatalogItem


class SelectionSaveRequest(BaseModel):
    # Presence is checked by the service so both failures answer 400 with a plain message
    customerId: Optional[Union[str, int]] = None
    items: Optional[List[Union[str, int]]] = None


class SelectionResponse(BaseModel):
    success: bool = True
    items: List[str]
    count: int


class SelectionSaveResponse(BaseModel):
    success: bool = True
    stored: List[str]


class FilterDefaults(BaseModel):
    make: Optional[str] = None
    year: Optional[int] = None
    model: Optional[str] = None


class FilterDefaultsResponse(BaseModel):
    success: bool = True
    items: List[CatalogItem]
    count: int
    defaultFilters: Optional[FilterDefaults] = None
    filterParams: Dict[str, str] = {}
