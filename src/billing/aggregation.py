from __future__ import annotations

from typing import Dict, Iterable, List

from .calculator import calculate
from .models import (
    CalculatedPayrollRecord,
    ClientBreakdownEntry,
    ClientCompany,
    MonthlyFinancials,
    PayrollRecord,
    StaffMember,
)
from .months import month_bounds


def _margin(profit: float, revenue: float) -> float:
    return profit / revenue * 100 if revenue > 0 else 0.0


def aggregate_month(
    records: Iterable[PayrollRecord],
    staff_roster: Iterable[StaffMember],
    month: str,
) -> MonthlyFinancials:
    """Sum calculated records into company totals for ``month``.

    Every record is calculated; filter with ``overlaps_month`` beforehand.
    Staff salaries are added in full since staff are not assignment based.
    """

    month_bounds(month)
    calculated = [calculate(record, month) for record in records]
    billed_income = sum(item.billed_amount for item in calculated)
    nurse_expenses = sum(item.payable_amount for item in calculated)
    gross_profit = billed_income - nurse_expenses
    staff_cost = sum(member.monthly_salary for member in staff_roster)
    net_profit = gross_profit - staff_cost

    return MonthlyFinancials(
        month=month,
        billed_income=billed_income,
        nurse_expenses=nurse_expenses,
        gross_profit=gross_profit,
        staff_cost=staff_cost,
        net_profit=net_profit,
        profit_margin=_margin(net_profit, billed_income),
        calculated=calculated,
    )


def breakdown_by_client(
    calculated_records: Iterable[CalculatedPayrollRecord],
    client_roster: Iterable[ClientCompany],
) -> List[ClientBreakdownEntry]:
    clients = {client.id: client for client in client_roster}
    entries: Dict[str, ClientBreakdownEntry] = {}

    for record in calculated_records:
        client = clients.get(record.client_id)
        if client is None:
            continue
        entry = entries.setdefault(client.id, ClientBreakdownEntry(client=client))
        entry.income += record.billed_amount
        entry.expenses += record.payable_amount
        entry.profit += record.profit

    for entry in entries.values():
        entry.margin = _margin(entry.profit, entry.income)
    return list(entries.values())
