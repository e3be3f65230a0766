# theatre/models/show.py
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SeatTier(str, Enum):
    VIP = "vip"
    PREMIUM = "premium"
    REGULAR = "regular"


class ShowPrice(BaseModel):
    vip: float = Field(..., ge=0)
    premium: float = Field(..., ge=0)
    regular: float = Field(..., ge=0)

    def for_tier(self, tier: SeatTier) -> float:
        return getattr(self, SeatTier(tier).value)


class ShowBase(BaseModel):
    title: str
    date: str   # ISO date, e.g. "2025-02-20"
    time: str   # "20:00"
    venue: str
    duration: str
    genre: str
    description: Optional[str] = ""
    image: Optional[str] = ""
    price: ShowPrice


class ShowCreate(ShowBase):
    pass


class Show(ShowBase):
    id: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Show":
        """Build a show from a ``shows`` table row (flat price columns)."""
        data = {k: v for k, v in row.items() if not k.startswith("price_")}
        data["price"] = {
            "vip": row["price_vip"],
            "premium": row["price_premium"],
            "regular": row["price_regular"],
        }
        return cls.model_validate(data)

    def to_row(self) -> Dict[str, Any]:
        row = self.model_dump(exclude={"price"})
        row["price_vip"] = self.price.vip
        row["price_premium"] = self.price.premium
        row["price_regular"] = self.price.regular
        return row


class Seat(BaseModel):
    id: str          # row letter + number, e.g. "A1"
    row: str
    number: int
    tier: SeatTier
    price: float
    is_available: bool
    is_selected: bool = False
