from datetime import date
from typing import List

from pydantic import BaseModel


class InventoryLotRead(BaseModel):
    id: int
    vendor_product_code: str
    date_arrival: date
    quantity_kg: float


class BeanListing(BaseModel):
    """Raw beans grouped by vendor code: summed kg, earliest arrival, lowest lot id"""
    rowcount: int
    items: List[InventoryLotRead]
