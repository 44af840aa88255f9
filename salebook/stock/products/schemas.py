from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional
from datetime import datetime

from salebook.ledger.identifiers import product_code


# -------------------------------
# Base
# -------------------------------
class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    low_stock: int = Field(default=0, ge=0)


# -------------------------------
# Create
# -------------------------------
class ProductCreate(ProductBase):
    stock: int = Field(default=0, ge=0)   # opening stock


# -------------------------------
# Update (stock is owned by the ledger)
# -------------------------------
class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    low_stock: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


# -------------------------------
# Output
# -------------------------------
class ProductOut(BaseModel):
    id: str
    name: str
    price: float
    cost: Optional[float] = None
    stock: int
    low_stock: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def code(self) -> str:
        return product_code(self.id)

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock


class ProductSimpleSchema(BaseModel):
    id: str
    name: str
    price: float
    stock: int

    model_config = ConfigDict(from_attributes=True)
