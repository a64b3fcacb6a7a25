from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Iterable

from billing.models import CalculatedPayrollRecord

from .storage import DataStore


CSV_HEADERS = [
    "Payroll ID",
    "Month",
    "Nurse",
    "Client",
    "Start Date",
    "End Date",
    "Days Worked",
    "Contract Amount",
    "Billed Amount",
    "Nurse Salary",
    "Transportation",
    "Overtime Days",
    "Overtime Amount",
    "Fines / Deductions",
    "Payable Amount",
    "Profit",
]


def _money(value: float) -> str:
    return f"{value:.2f}"


def _number(value: float) -> str:
    return f"{value:g}"


def export_filename(month: str, currency: str, timestamp: datetime) -> str:
    stamp = timestamp.isoformat().replace(":", "-").replace(".", "-")
    return f"payroll-{month}-{currency}-{stamp}.csv"


def export_payroll(
    path: Path,
    calculated: Iterable[CalculatedPayrollRecord],
    store: DataStore,
    month: str,
) -> int:
    """Write calculated payroll rows to ``path`` and return how many were written."""

    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_HEADERS)
        writer.writeheader()
        for item in calculated:
            writer.writerow(
                {
                    "Payroll ID": item.id,
                    "Month": month,
                    "Nurse": store.nurse_name(item.nurse_id),
                    "Client": store.client_name(item.client_id),
                    "Start Date": item.start_date.isoformat(),
                    "End Date": item.end_date.isoformat(),
                    "Days Worked": item.days_worked,
                    "Contract Amount": _money(item.contract_amount),
                    "Billed Amount": _money(item.billed_amount),
                    "Nurse Salary": _money(item.base_salary_amount),
                    "Transportation": _money(item.transportation_amount),
                    "Overtime Days": _number(item.overtime_days),
                    "Overtime Amount": _money(item.overtime_amount),
                    "Fines / Deductions": _money(item.fines),
                    "Payable Amount": _money(item.payable_amount),
                    "Profit": _money(item.profit),
                }
            )
            written += 1
    return written
