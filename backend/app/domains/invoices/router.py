from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from billing.invoices import next_invoice_number
from billing.months import month_bounds
from staffing.documents import build_invoice
from staffing.storage import DataStore

from app.api.deps import get_store
from app.core.config import settings

router = APIRouter(prefix="/invoices", tags=["invoices"])


class InvoiceLineOut(BaseModel):
    nurse_name: str
    start_date: date
    end_date: date
    days_worked: int
    amount: float


class InvoiceOut(BaseModel):
    number: str
    invoice_date: date
    month: str
    client_id: str
    client_name: str
    client_trn: str | None = None
    currency: str
    vat_rate: float
    lines: list[InvoiceLineOut]
    subtotal: float
    vat_amount: float
    total: float


@router.get("/next-number")
def next_number(store: DataStore = Depends(get_store)) -> dict[str, str]:
    return {"number": next_invoice_number(len(store.payroll_records), prefix=settings.invoice_prefix)}


@router.get("/{client_id}", response_model=InvoiceOut)
def client_invoice(
    client_id: str,
    month: str,
    invoice_date: date | None = None,
    number: str | None = None,
    store: DataStore = Depends(get_store),
):
    month_bounds(month)
    if client_id not in store.clients:
        raise HTTPException(status_code=404, detail="Client not found")
    invoice = build_invoice(
        store,
        client_id,
        month,
        invoice_date=invoice_date,
        invoice_number=number,
        prefix=settings.invoice_prefix,
    )
    return InvoiceOut(
        number=invoice.number,
        invoice_date=invoice.invoice_date,
        month=invoice.month,
        client_id=invoice.client.id,
        client_name=invoice.client.name,
        client_trn=invoice.client.trn,
        currency=invoice.settings.currency.value,
        vat_rate=invoice.settings.vat_rate,
        lines=[InvoiceLineOut(**vars(line)) for line in invoice.lines],
        subtotal=invoice.subtotal,
        vat_amount=invoice.vat_amount,
        total=invoice.total,
    )
