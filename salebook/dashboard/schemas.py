from typing import List, Optional

from pydantic import BaseModel

from salebook.activity.schemas import RecentActivityOut


class TopClient(BaseModel):
    client_id: Optional[str] = None
    name: str
    phone: str
    total: float


class DailySalesPoint(BaseModel):
    date: str      # day of month, "01".."31"
    sales: float


class DashboardOut(BaseModel):
    total_sales: float
    total_clients: int
    daily_sales: float
    monthly_sales: float
    cost_of_goods_sold: float
    total_expenses: float
    profit_or_loss: float
    top_clients: List[TopClient]
    sales_chart: List[DailySalesPoint]
    recent_activities: List[RecentActivityOut]
