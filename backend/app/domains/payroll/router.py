from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from billing.calculator import calculate
from billing.models import CalculatedPayrollRecord
from staffing.storage import DataStore

from app.api.deps import get_store

router = APIRouter(prefix="/payroll", tags=["payroll"])


class CalculatedRecordOut(BaseModel):
    id: str
    month: str
    nurse_id: str
    nurse_name: str
    client_id: str
    client_name: str
    start_date: date
    end_date: date
    full_month: bool
    days_worked: int
    total_working_days: int
    proration: float
    contract_amount: float
    billed_amount: float
    base_salary_amount: float
    transportation_amount: float
    overtime_days: float
    overtime_amount: float
    fines: float
    payable_amount: float
    profit: float


def to_out(item: CalculatedPayrollRecord, store: DataStore) -> CalculatedRecordOut:
    return CalculatedRecordOut(
        id=item.id,
        month=item.month,
        nurse_id=item.nurse_id,
        nurse_name=store.nurse_name(item.nurse_id),
        client_id=item.client_id,
        client_name=store.client_name(item.client_id),
        start_date=item.start_date,
        end_date=item.end_date,
        full_month=item.full_month,
        days_worked=item.days_worked,
        total_working_days=item.total_working_days,
        proration=item.proration,
        contract_amount=item.contract_amount,
        billed_amount=item.billed_amount,
        base_salary_amount=item.base_salary_amount,
        transportation_amount=item.transportation_amount,
        overtime_days=item.overtime_days,
        overtime_amount=item.overtime_amount,
        fines=item.fines,
        payable_amount=item.payable_amount,
        profit=item.profit,
    )


@router.get("", response_model=list[CalculatedRecordOut])
def list_calculated(month: str, client_id: str | None = None, store: DataStore = Depends(get_store)):
    records = store.records_for_month(month, client_id=client_id)
    return [to_out(calculate(record, month), store) for record in records]


@router.get("/{record_id}", response_model=CalculatedRecordOut)
def get_calculated(record_id: str, month: str, store: DataStore = Depends(get_store)):
    record = store.payroll_records.get(record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Payroll record not found")
    return to_out(calculate(record, month), store)
