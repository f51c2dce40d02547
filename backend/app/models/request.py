"""
Pydantic models for Wine List Scanner API requests.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..services.wine_records import WineListItem
from .response import WineResult


class WineListItemIn(BaseModel):
    """A parsed line from a wine list image."""
    raw_text: str = Field("", description="Original OCR text of the line")
    wine_name: str = Field(..., min_length=1, description="Wine name as printed")
    price: float = Field(..., ge=0, description="Restaurant price (no currency)")
    vintage: Optional[str] = Field(None, description="Vintage year, if printed")
    confidence: Optional[float] = Field(None, ge=0, le=1, description="OCR confidence")

    @field_validator("vintage", mode="before")
    @classmethod
    def coerce_vintage(cls, v):
        """Accept numeric vintages (2015 -> "2015")."""
        if v is None or v == "":
            return None
        return str(v)

    def to_item(self) -> WineListItem:
        return WineListItem(
            raw_text=self.raw_text or self.wine_name,
            wine_name=self.wine_name,
            price=self.price,
            vintage=self.vintage,
            confidence=self.confidence,
        )


class AnalyzeRequest(BaseModel):
    """Request body for /lists/analyze."""
    items: list[WineListItemIn] = Field(default_factory=list)


class RankRequest(BaseModel):
    """Request body for /lists/rank: already enriched wines."""
    wines: list[WineResult] = Field(default_factory=list)
