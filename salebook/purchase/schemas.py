from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Literal, Optional


class PurchaseItemData(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    cost: float = Field(ge=0)


class PurchaseItemOut(BaseModel):
    product_id: Optional[str] = None
    item_name: str
    quantity: int
    cost: float

    model_config = ConfigDict(from_attributes=True)


class PurchaseCreate(BaseModel):
    vendor_id: str
    date: Optional[datetime] = None
    items: List[PurchaseItemData] = Field(min_length=1)


class PurchaseUpdate(PurchaseCreate):
    pass


class PurchaseOut(BaseModel):
    id: str
    display_id: str
    vendor_id: Optional[str] = None
    vendor_name: str
    date: datetime
    amount: float
    quantity: int
    transaction_type: Literal["Purchase"] = "Purchase"
    items: List[PurchaseItemOut] = []

    model_config = ConfigDict(from_attributes=True)
