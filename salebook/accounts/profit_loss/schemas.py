from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class Period(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ItemSold(BaseModel):
    name: str
    quantity: int
    total_sales: float


class ProfitLossOut(BaseModel):
    period: Period
    total_sales: float
    cost_of_goods_sold: float
    gross_profit: float
    total_expenses: float
    net_profit: float
    items_sold: List[ItemSold]
