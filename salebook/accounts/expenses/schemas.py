from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List, Literal, Optional


# =========================
# Create / Update
# =========================
class ExpenseCreate(BaseModel):
    description: str
    amount: float = Field(gt=0)
    vendor_id: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("description is required")
        return v.strip()


class ExpenseUpdate(ExpenseCreate):
    pass


# =========================
# Output
# =========================
class ExpenseOut(BaseModel):
    id: str
    display_id: str
    description: str
    amount: float
    vendor_id: Optional[str] = None
    vendor_name: str = ""
    date: datetime
    transaction_type: Literal["Expense"] = "Expense"

    model_config = ConfigDict(from_attributes=True)


class ExpenseListOut(BaseModel):
    total_expenses: float
    expenses: List[ExpenseOut]
