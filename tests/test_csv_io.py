import csv
from datetime import date, datetime

from billing.calculator import calculate
from staffing.csv_io import CSV_HEADERS, export_filename, export_payroll
from staffing.storage import DataStore

from factories import make_record


def test_export_payroll_writes_formatted_rows(tmp_path):
    store = DataStore(tmp_path / "store.json")
    store.upsert_nurse("Grace, RN", 2000, 300, nurse_id="n1")
    store.upsert_client("Alpha Clinic", client_id="c1")
    calculated = [
        calculate(make_record(id="r1", start_date=date(2024, 2, 15), end_date=date(2024, 2, 20)), "2024-02"),
        calculate(make_record(id="r2", client_id="gone", full_month=True, overtime_days=1.5), "2024-02"),
    ]
    output = tmp_path / "out" / "payroll.csv"

    written = export_payroll(output, calculated, store, "2024-02")

    with output.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        rows = list(reader)
        assert reader.fieldnames == CSV_HEADERS
    assert written == 2
    first, second = rows
    assert first["Nurse"] == "Grace, RN"
    assert first["Client"] == "Alpha Clinic"
    assert first["Days Worked"] == "4"
    assert first["Contract Amount"] == "3000.00"
    assert first["Billed Amount"] == "571.43"
    assert first["Start Date"] == "2024-02-15"
    assert second["Client"] == "Unknown Client"
    assert second["Overtime Days"] == "1.5"
    assert second["Payable Amount"] == "2442.86"


def test_export_filename_replaces_time_separators():
    stamp = datetime(2024, 2, 1, 12, 30, 15, 123000)

    assert export_filename("2024-02", "AED", stamp) == "payroll-2024-02-AED-2024-02-01T12-30-15-123000.csv"
