from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from billing.calculator import calculate
from billing.invoices import DEFAULT_PREFIX, next_invoice_number
from billing.models import (
    CalculatedPayrollRecord,
    ClientBreakdownEntry,
    ClientCompany,
    CompanySettings,
    MonthlyFinancials,
)
from billing.months import month_label

from .storage import DataStore


@dataclass
class InvoiceLine:
    nurse_name: str
    start_date: date
    end_date: date
    days_worked: int
    amount: float


@dataclass
class Invoice:
    number: str
    invoice_date: date
    month: str
    client: ClientCompany
    settings: CompanySettings
    lines: List[InvoiceLine] = field(default_factory=list)

    @property
    def subtotal(self) -> float:
        return sum(line.amount for line in self.lines)

    @property
    def vat_amount(self) -> float:
        return self.subtotal * (self.settings.vat_rate or 0) / 100

    @property
    def total(self) -> float:
        return self.subtotal + self.vat_amount


@dataclass
class FinancialStatement:
    month: str
    settings: CompanySettings
    financials: MonthlyFinancials
    breakdown: List[ClientBreakdownEntry]


def format_currency(value: float, currency: str) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{currency} {abs(value):,.2f}"


def build_invoice(
    store: DataStore,
    client_id: str,
    month: str,
    invoice_date: Optional[date] = None,
    invoice_number: Optional[str] = None,
    prefix: str = DEFAULT_PREFIX,
) -> Invoice:
    client = store.clients[client_id]
    calculated: List[CalculatedPayrollRecord] = [
        calculate(record, month) for record in store.records_for_month(month, client_id=client_id)
    ]
    lines = [
        InvoiceLine(
            nurse_name=store.nurse_name(item.nurse_id),
            start_date=item.start_date,
            end_date=item.end_date,
            days_worked=item.days_worked,
            amount=item.billed_amount,
        )
        for item in calculated
    ]
    return Invoice(
        number=invoice_number or next_invoice_number(len(store.payroll_records), prefix=prefix),
        invoice_date=invoice_date or date.today(),
        month=month,
        client=client,
        settings=store.settings,
        lines=lines,
    )


def build_statement(store: DataStore, month: str) -> FinancialStatement:
    financials = store.monthly_financials(month)
    breakdown = store.client_breakdown(month)
    return FinancialStatement(month=month, settings=store.settings, financials=financials, breakdown=breakdown)


def format_invoice(invoice: Invoice) -> str:
    settings = invoice.settings
    currency = settings.currency.value
    rows = [
        f"{settings.company_name} - Tax Invoice for {month_label(invoice.month)}",
        f"Invoice #: {invoice.number}",
        f"Invoice Date: {invoice.invoice_date.strftime('%d/%m/%Y')}",
    ]
    if settings.company_trn:
        rows.append(f"Company TRN: {settings.company_trn}")
    rows.append(f"Client: {invoice.client.name}")
    if invoice.client.trn:
        rows.append(f"Client TRN: {invoice.client.trn}")
    rows.append("")
    rows.append(f"{'Nurse':<24}{'Start':<12}{'End':<12}{'Days':>5}  {'Amount':>16}")
    if not invoice.lines:
        rows.append("No payroll records for the selected client and month.")
    for line in invoice.lines:
        rows.append(
            f"{line.nurse_name[:23]:<24}{line.start_date.strftime('%d/%m/%Y'):<12}"
            f"{line.end_date.strftime('%d/%m/%Y'):<12}{line.days_worked:>5}  {format_currency(line.amount, currency):>16}"
        )
    rows.append("")
    rows.append(f"Subtotal: {format_currency(invoice.subtotal, currency)}")
    rows.append(f"VAT ({settings.vat_rate:g}%): {format_currency(invoice.vat_amount, currency)}")
    rows.append(f"Total Amount: {format_currency(invoice.total, currency)}")
    rows.append("")
    rows.append(f"Bank: {settings.bank_name or 'Update in settings'}")
    rows.append(f"Account: {settings.bank_account_number or 'Update in settings'}")
    rows.append(f"IBAN: {settings.iban or 'Update in settings'}")
    if settings.bank_company_trn:
        rows.append(f"Company TRN: {settings.bank_company_trn}")
    rows.append(settings.contact_note)
    return "\n".join(rows)


def format_statement(statement: FinancialStatement) -> str:
    currency = statement.settings.currency.value
    totals = statement.financials
    rows = [
        f"{statement.settings.company_name} - Financial Statement for {month_label(statement.month)}",
        f"Billed income:   {format_currency(totals.billed_income, currency)}",
        f"Nurse expenses:  {format_currency(totals.nurse_expenses, currency)}",
        f"Gross profit:    {format_currency(totals.gross_profit, currency)}",
        f"Staff salaries:  {format_currency(totals.staff_cost, currency)}",
        f"Net profit:      {format_currency(totals.net_profit, currency)}",
        f"Profit margin:   {totals.profit_margin:.2f}%",
        "",
        "Client breakdown",
    ]
    if not statement.breakdown:
        rows.append("No client activity for this month.")
    for entry in statement.breakdown:
        rows.append(
            f"{entry.client.name[:23]:<24}income {format_currency(entry.income, currency)}"
            f"  expenses {format_currency(entry.expenses, currency)}"
            f"  profit {format_currency(entry.profit, currency)}  margin {entry.margin:.2f}%"
        )
    return "\n".join(rows)
