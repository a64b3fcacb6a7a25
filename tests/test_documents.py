from datetime import date

import pytest

from staffing.documents import build_invoice, build_statement, format_currency, format_invoice, format_statement
from staffing.storage import DataStore


def invoice_store(path) -> DataStore:
    store = DataStore(path)
    store.upsert_nurse("Grace Hopper", 2000, 300, nurse_id="n1")
    store.upsert_client("Alpha Clinic", trn="100200300", client_id="c1")
    store.upsert_client("Beta Hospital", client_id="c2")
    store.upsert_staff("Ada", "Coordinator", 1000, staff_id="s1")
    for record_id, client_id in (("r1", "c1"), ("r2", "c2")):
        store.upsert_payroll(
            nurse_id="n1",
            client_id=client_id,
            contract_amount=3000,
            salary=2000,
            transportation=300,
            overtime_days=0,
            fines=0,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 29),
            full_month=True,
            record_id=record_id,
        )
    return store


def test_build_invoice_applies_vat_to_billed_subtotal(tmp_path):
    store = invoice_store(tmp_path / "store.json")

    invoice = build_invoice(store, "c1", "2024-02", invoice_date=date(2024, 3, 1))

    assert invoice.number == "INV-0003"
    assert [line.amount for line in invoice.lines] == [3000]
    assert invoice.subtotal == 3000
    assert invoice.vat_amount == pytest.approx(150)
    assert invoice.total == pytest.approx(3150)


def test_build_invoice_respects_explicit_number(tmp_path):
    store = invoice_store(tmp_path / "store.json")

    invoice = build_invoice(store, "c2", "2024-03", invoice_number="INV-0100")

    assert invoice.number == "INV-0100"
    assert invoice.lines == []
    assert invoice.total == 0


def test_build_invoice_unknown_client_raises(tmp_path):
    store = invoice_store(tmp_path / "store.json")

    with pytest.raises(KeyError):
        build_invoice(store, "missing", "2024-02")


def test_format_invoice_lists_lines_and_totals(tmp_path):
    store = invoice_store(tmp_path / "store.json")
    invoice = build_invoice(store, "c1", "2024-02", invoice_date=date(2024, 3, 1))

    text = format_invoice(invoice)

    assert "Tax Invoice for February 2024" in text
    assert "Invoice Date: 01/03/2024" in text
    assert "Client TRN: 100200300" in text
    assert "Grace Hopper" in text
    assert "VAT (5%): AED 150.00" in text
    assert "Total Amount: AED 3,150.00" in text
    assert "Bank: Update in settings" in text


def test_format_statement_includes_totals_and_clients(tmp_path):
    store = invoice_store(tmp_path / "store.json")

    text = format_statement(build_statement(store, "2024-02"))

    assert "Financial Statement for February 2024" in text
    assert "Billed income:   AED 6,000.00" in text
    assert "Net profit:      AED 400.00" in text
    assert "Alpha Clinic" in text
    assert "Beta Hospital" in text


def test_format_currency_handles_negative_values():
    assert format_currency(-12000, "AED") == "-AED 12,000.00"
    assert format_currency(571.428, "USD") == "USD 571.43"
