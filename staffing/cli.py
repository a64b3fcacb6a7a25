from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

from billing.errors import BillingError
from billing.invoices import next_invoice_number
from billing.months import format_month, month_label, recent_months

from .csv_io import export_payroll
from .documents import build_invoice, build_statement, format_currency, format_invoice, format_statement
from .logging import configure_logging
from .storage import DataStore


DEFAULT_DATA_PATH = Path("data/staffing.json")


def store_from_args(args: argparse.Namespace) -> DataStore:
    return DataStore(Path(args.data) if args.data else DEFAULT_DATA_PATH)


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def current_month() -> str:
    return format_month(date.today())


def cmd_add_nurse(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    nurse = store.upsert_nurse(args.name, args.salary, args.transportation, nurse_id=args.id)
    store.save()
    print(f"Saved nurse {nurse.id} ({nurse.name})")


def cmd_add_staff(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    member = store.upsert_staff(args.name, args.designation, args.salary, staff_id=args.id)
    store.save()
    print(f"Saved staff member {member.id} ({member.name})")


def cmd_add_client(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    client = store.upsert_client(args.name, trn=args.trn, client_id=args.id)
    store.save()
    print(f"Saved client {client.id} ({client.name})")


def cmd_add_payroll(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    nurse = store.nurses[args.nurse]
    if args.client not in store.clients:
        raise KeyError(args.client)
    record = store.upsert_payroll(
        nurse_id=args.nurse,
        client_id=args.client,
        contract_amount=args.contract,
        salary=nurse.default_salary if args.salary is None else args.salary,
        transportation=nurse.default_transportation if args.transportation is None else args.transportation,
        overtime_days=args.overtime_days,
        fines=args.fines,
        start_date=args.start,
        end_date=args.end,
        full_month=args.full_month,
        record_id=args.id,
    )
    store.save()
    print(f"Saved payroll record {record.id} {record.start_date} - {record.end_date}")


def cmd_delete(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    removers = {
        "nurse": store.delete_nurse,
        "staff": store.delete_staff,
        "client": store.delete_client,
        "payroll": store.delete_payroll,
    }
    removers[args.kind](args.id)
    store.save()
    print(f"Deleted {args.kind} {args.id}")


def cmd_settings(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    changes = {
        key: value
        for key, value in {
            "company_name": args.company_name,
            "company_trn": args.company_trn,
            "currency": args.currency,
            "vat_rate": args.vat_rate,
            "bank_name": args.bank_name,
            "bank_account_number": args.bank_account,
            "iban": args.iban,
            "bank_company_trn": args.bank_company_trn,
            "contact_note": args.contact_note,
        }.items()
        if value is not None
    }
    if changes:
        store.update_settings(**changes)
        store.save()
    settings = store.settings
    print(f"Company: {settings.company_name}")
    print(f"Currency: {settings.currency.value}  VAT: {settings.vat_rate:g}%")
    print(f"Bank: {settings.bank_name or '-'}  Account: {settings.bank_account_number or '-'}  IBAN: {settings.iban or '-'}")


def cmd_records(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    currency = store.settings.currency.value
    financials = store.monthly_financials(args.month)
    for item in financials.calculated:
        print(
            f"{item.id} {store.nurse_name(item.nurse_id)} @ {store.client_name(item.client_id)} "
            f"days={item.days_worked}/{item.total_working_days} "
            f"billed={format_currency(item.billed_amount, currency)} "
            f"payable={format_currency(item.payable_amount, currency)} "
            f"profit={format_currency(item.profit, currency)}"
        )


def cmd_summary(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    currency = store.settings.currency.value
    totals = store.monthly_financials(args.month)
    print(f"{month_label(args.month)}: {len(totals.calculated)} active records")
    print(f"Billed income: {format_currency(totals.billed_income, currency)}")
    print(f"Nurse expenses: {format_currency(totals.nurse_expenses, currency)}")
    print(f"Gross profit: {format_currency(totals.gross_profit, currency)}")
    print(f"Staff salaries: {format_currency(totals.staff_cost, currency)}")
    print(f"Net profit: {format_currency(totals.net_profit, currency)}")
    print(f"Profit margin: {totals.profit_margin:.2f}%")


def cmd_breakdown(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    currency = store.settings.currency.value
    for entry in store.client_breakdown(args.month):
        print(
            f"{entry.client.name}: income {format_currency(entry.income, currency)} "
            f"expenses {format_currency(entry.expenses, currency)} "
            f"profit {format_currency(entry.profit, currency)} margin {entry.margin:.2f}%"
        )


def cmd_export(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    financials = store.monthly_financials(args.month)
    if not financials.calculated:
        print("No payroll records available for this month.")
        return
    path = Path(args.path)
    count = export_payroll(path, financials.calculated, store, args.month)
    print(f"Exported {count} records to {path}")


def cmd_invoice(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    invoice = build_invoice(
        store,
        args.client,
        args.month,
        invoice_date=args.date,
        invoice_number=args.number,
        prefix=args.prefix,
    )
    print(format_invoice(invoice))


def cmd_next_invoice(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    print(next_invoice_number(len(store.payroll_records), prefix=args.prefix))


def cmd_statement(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    print(format_statement(build_statement(store, args.month)))


def cmd_months(args: argparse.Namespace) -> None:
    for month in recent_months(args.count):
        print(f"{month}  {month_label(month)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nurse staffing payroll and billing CLI")
    parser.add_argument("--data", help=f"Datastore path (default {DEFAULT_DATA_PATH})")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    nurse = sub.add_parser("add-nurse", help="Add or update a nurse")
    nurse.add_argument("name")
    nurse.add_argument("--salary", type=float, default=0.0, help="Default monthly salary")
    nurse.add_argument("--transportation", type=float, default=0.0, help="Default monthly transportation")
    nurse.add_argument("--id")
    nurse.set_defaults(func=cmd_add_nurse)

    staff = sub.add_parser("add-staff", help="Add or update an internal staff member")
    staff.add_argument("name")
    staff.add_argument("designation")
    staff.add_argument("salary", type=float, help="Monthly salary")
    staff.add_argument("--id")
    staff.set_defaults(func=cmd_add_staff)

    client = sub.add_parser("add-client", help="Add or update a client company")
    client.add_argument("name")
    client.add_argument("--trn", help="Tax registration number")
    client.add_argument("--id")
    client.set_defaults(func=cmd_add_client)

    payroll = sub.add_parser("add-payroll", help="Add or update a payroll record")
    payroll.add_argument("nurse")
    payroll.add_argument("client")
    payroll.add_argument("start", type=parse_date)
    payroll.add_argument("end", type=parse_date)
    payroll.add_argument("--contract", type=float, required=True, help="Monthly amount billed to the client")
    payroll.add_argument("--salary", type=float, help="Defaults to the nurse's default salary")
    payroll.add_argument("--transportation", type=float, help="Defaults to the nurse's default transportation")
    payroll.add_argument("--overtime-days", type=float, default=0.0)
    payroll.add_argument("--fines", type=float, default=0.0)
    payroll.add_argument("--full-month", action="store_true")
    payroll.add_argument("--id")
    payroll.set_defaults(func=cmd_add_payroll)

    delete = sub.add_parser("delete", help="Delete a roster entry or payroll record")
    delete.add_argument("kind", choices=["nurse", "staff", "client", "payroll"])
    delete.add_argument("id")
    delete.set_defaults(func=cmd_delete)

    settings = sub.add_parser("settings", help="Show or update company settings")
    settings.add_argument("--company-name")
    settings.add_argument("--company-trn")
    settings.add_argument("--currency", choices=["AED", "USD", "EUR", "GBP", "SAR"])
    settings.add_argument("--vat-rate", type=float)
    settings.add_argument("--bank-name")
    settings.add_argument("--bank-account")
    settings.add_argument("--iban")
    settings.add_argument("--bank-company-trn")
    settings.add_argument("--contact-note")
    settings.set_defaults(func=cmd_settings)

    for name, func, help_text in (
        ("records", cmd_records, "List calculated payroll records for a month"),
        ("summary", cmd_summary, "Show monthly company financials"),
        ("breakdown", cmd_breakdown, "Show per-client profitability"),
        ("statement", cmd_statement, "Render the monthly financial statement"),
    ):
        report = sub.add_parser(name, help=help_text)
        report.add_argument("--month", default=current_month(), help="YYYY-MM")
        report.set_defaults(func=func)

    export = sub.add_parser("export", help="Export calculated payroll records to CSV")
    export.add_argument("path")
    export.add_argument("--month", default=current_month(), help="YYYY-MM")
    export.set_defaults(func=cmd_export)

    invoice = sub.add_parser("invoice", help="Render a client tax invoice")
    invoice.add_argument("client")
    invoice.add_argument("--month", default=current_month(), help="YYYY-MM")
    invoice.add_argument("--date", type=parse_date, help="Invoice date, defaults to today")
    invoice.add_argument("--number", help="Override the generated invoice number")
    invoice.add_argument("--prefix", default="INV")
    invoice.set_defaults(func=cmd_invoice)

    next_invoice = sub.add_parser("next-invoice", help="Show the next invoice number")
    next_invoice.add_argument("--prefix", default="INV")
    next_invoice.set_defaults(func=cmd_next_invoice)

    months = sub.add_parser("months", help="List recent months")
    months.add_argument("--count", type=int, default=12)
    months.set_defaults(func=cmd_months)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except BillingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2)
    except KeyError as exc:
        print(f"error: unknown id {exc}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
