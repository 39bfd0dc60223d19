from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class CatalogItemCreate(BaseModel):
    product_code: str
    # Column limits: INTEGER and NUMERIC(10, 2)
    quantity: int = Field(ge=0, le=2**31 - 1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    time_roasted: datetime
    roasting_notes: str
    img: Optional[str] = None

    @field_validator("product_code")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("img")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("time_roasted")
    @classmethod
    def _naive_utc(cls, v: datetime) -> datetime:
        # Stored as naive UTC
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class CatalogItemRead(BaseModel):
    id: int
    product_code: str
    quantity: int
    price: float
    time_roasted: datetime
    roasting_notes: str
    img: Optional[str] = None


class CatalogProductOut(BaseModel):
    catalog_id: int
    product_code: str
    quantity: int
    time_roasted: datetime
    roasting_notes: str
    img: Optional[str] = None
    price: float


class CatalogListing(BaseModel):
    rowcount: int
    products: List[CatalogProductOut]


class CreatedOut(BaseModel):
    success: int = 1
