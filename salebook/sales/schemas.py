from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime


PaymentMethod = Literal["COD", "BANK", "WING", ""]


# ---------- Sale Item ----------
class SaleItemData(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0)


class SaleItemOut(BaseModel):
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    price: float
    discount: float
    net_amount: float

    model_config = ConfigDict(from_attributes=True)


# ---------- Sale ----------
class SaleCreate(BaseModel):
    client_id: str
    date: Optional[datetime] = None      # defaults to now in the business timezone
    items: List[SaleItemData] = Field(min_length=1)
    delivery_fee: float = Field(default=0, ge=0)
    payment_method: PaymentMethod = ""


class SaleUpdate(SaleCreate):
    """Full replacement of a posted sale; stock is reconciled against the old items."""


class SaleOut(BaseModel):
    id: str
    display_id: str
    client_id: Optional[str] = None
    client_name: str
    date: datetime
    amount: float
    quantity: int
    discount: float
    delivery_fee: float
    payment_method: str
    transaction_type: Literal["Sale"] = "Sale"
    items: List[SaleItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class SaleReceiptOut(SaleOut):
    client_phone: Optional[str] = None
    client_province: Optional[str] = None
    client_location: Optional[str] = None
