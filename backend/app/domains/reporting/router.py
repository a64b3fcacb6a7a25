from fastapi import APIRouter, Depends
from pydantic import BaseModel

from staffing.storage import DataStore

from app.api.deps import get_store

router = APIRouter(prefix="/reports", tags=["reporting"])


class MonthlyFinancialsOut(BaseModel):
    month: str
    record_count: int
    billed_income: float
    nurse_expenses: float
    gross_profit: float
    staff_cost: float
    net_profit: float
    profit_margin: float


class ClientBreakdownOut(BaseModel):
    client_id: str
    client_name: str
    income: float
    expenses: float
    profit: float
    margin: float


@router.get("/{month}/financials", response_model=MonthlyFinancialsOut)
def monthly_financials(month: str, store: DataStore = Depends(get_store)) -> MonthlyFinancialsOut:
    totals = store.monthly_financials(month)
    return MonthlyFinancialsOut(
        month=totals.month,
        record_count=len(totals.calculated),
        billed_income=totals.billed_income,
        nurse_expenses=totals.nurse_expenses,
        gross_profit=totals.gross_profit,
        staff_cost=totals.staff_cost,
        net_profit=totals.net_profit,
        profit_margin=totals.profit_margin,
    )


@router.get("/{month}/clients", response_model=list[ClientBreakdownOut])
def client_breakdown(month: str, store: DataStore = Depends(get_store)) -> list[ClientBreakdownOut]:
    return [
        ClientBreakdownOut(
            client_id=entry.client.id,
            client_name=entry.client.name,
            income=entry.income,
            expenses=entry.expenses,
            profit=entry.profit,
            margin=entry.margin,
        )
        for entry in store.client_breakdown(month)
    ]
