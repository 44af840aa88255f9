from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel


TransactionType = Literal["Sale", "Purchase", "Expense"]


class LedgerEntryOut(BaseModel):
    id: str
    display_id: str
    transaction_type: TransactionType
    date: datetime
    amount: float
    party: str
    details: str


class LedgerDayOut(BaseModel):
    date: str
    transactions: List[LedgerEntryOut]


class LedgerSummaryOut(BaseModel):
    cash_in: float
    cash_out: float
    net_cash_flow: float
    cost_of_goods_sold: float
    total_expenses: float
    profit_loss: float


class LedgerListOut(BaseModel):
    days: List[LedgerDayOut]
    summary: LedgerSummaryOut
