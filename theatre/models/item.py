# theatre/models/item.py
from pydantic import BaseModel, Field, field_validator

ITEM_CATEGORIES = ("food", "merchandise", "program")


class ConcessionItem(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0)
    category: str
    description: str = ""

    @field_validator("category")
    def validate_category(cls, v):
        if v not in ITEM_CATEGORIES:
            raise ValueError(f"category must be one of {', '.join(ITEM_CATEGORIES)}")
        return v


class CartItem(ConcessionItem):
    quantity: int = Field(..., ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class ItemQuantityRequest(BaseModel):
    quantity: int
