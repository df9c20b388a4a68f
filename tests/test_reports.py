"""Tests for the PDF and Excel writers."""

from datetime import date, datetime

import pandas as pd

from export_excel import excel_file_name, export_ledger_excel, export_rows_to_excel
from ledger import BANK_TITLE, build_ledger
from ledger_pdf import HEADERS, generate_ledger_pdf, ledger_pdf_name, ledger_table_rows
from models import Payment
from payment_pdf import generate_payment_pdf


def _report(accounts, make_txn, title="Cash Accounts"):
    return build_ledger(accounts, [make_txn("a1", 250.0), make_txn("a2", 100.0, "Withdrawal")], title=title)


def test_table_rows_have_header_rows_and_totals(accounts, make_txn):
    rows = ledger_table_rows(_report(accounts, make_txn))

    assert rows[0] == HEADERS
    assert len(rows) == 1 + len(accounts) + 1
    assert rows[1][:2] == ["1", "Cash"]
    assert rows[1][2:4] == ["Rs.1,000.00", "CR"]
    # Petty cash: opening -500, withdraw 100 -> closing -600
    assert rows[2][2:] == ["(Rs.500.00)", "DB", "Rs.100.00", "Rs.0.00", "(Rs.600.00)", "DB"]
    assert rows[-1][:2] == ["", "Sum of: Cash Accounts"]
    assert rows[-1][6] == "Rs.650.00"


def test_pdf_name_uses_book_and_date(accounts, make_txn):
    today = date(2024, 4, 9)
    assert ledger_pdf_name(_report(accounts, make_txn), today) == "Cash_Book_2024-04-09.pdf"
    assert ledger_pdf_name(_report(accounts, make_txn, BANK_TITLE), today) == "Bank_Book_2024-04-09.pdf"


def test_generate_ledger_pdf(tmp_path, accounts, make_txn):
    path = generate_ledger_pdf(_report(accounts, make_txn), out_dir=str(tmp_path), today=date(2024, 4, 9))

    assert path.endswith("Cash_Book_2024-04-09.pdf")
    with open(path, "rb") as f:
        assert f.read(4) == b"%PDF"


def test_generate_ledger_pdf_defaults_to_reports_dir(base_dir, accounts):
    path = generate_ledger_pdf(build_ledger(accounts, []))
    assert str(base_dir / "reports") in path


def test_generate_payment_pdf(tmp_path):
    payment = Payment(
        id="p/1",
        date="2024-02-01",
        party_name="Apollo Pharmacy",
        party_type="customer",
        amount=1500.0,
        method="UPI",
        notes="Advance",
    )
    path = generate_payment_pdf(payment, out_dir=str(tmp_path), printed_at=datetime(2024, 2, 1, 9, 0))

    assert path.endswith("payment_p-1.pdf")
    with open(path, "rb") as f:
        assert f.read(4) == b"%PDF"


def test_excel_file_name():
    assert excel_file_name("report") == "report.xlsx"
    assert excel_file_name("report.XLSX") == "report.XLSX"


def test_export_rows_to_excel(tmp_path):
    rows = [{"Date": "2024-01-01", "Amount": 10.5}, {"Date": "2024-01-02", "Amount": 3}]
    path = export_rows_to_excel(rows, "accounting-income", sheet_name="Accounting", out_dir=str(tmp_path))

    df = pd.read_excel(path, sheet_name="Accounting")
    assert list(df.columns) == ["Date", "Amount"]
    assert df["Amount"].tolist() == [10.5, 3]


def test_export_ledger_excel_keeps_both_marker_columns(tmp_path, accounts, make_txn):
    path = export_ledger_excel(_report(accounts, make_txn), out_dir=str(tmp_path))

    df = pd.read_excel(path, sheet_name="Cash Accounts")
    assert "OPENING C/D" in df.columns
    assert "CLOSING C/D" in df.columns
    assert len(df) == len(accounts) + 1


def test_export_ledger_excel_writes_numeric_amounts(tmp_path, accounts, make_txn):
    path = export_ledger_excel(_report(accounts, make_txn), out_dir=str(tmp_path))

    df = pd.read_excel(path, sheet_name="Cash Accounts")
    assert df["OPENING"].tolist() == [1000.0, -500.0, 0.0, 500.0]
    assert df["CLOSING AMOUNT"].tolist() == [1250.0, -600.0, 0.0, 650.0]
    assert df["CLOSING C/D"].tolist() == ["CR", "DB", "CR", "CR"]
    assert df["ACCOUNT NAME"].iloc[-1] == "Sum of: Cash Accounts"
    assert df["WITHDRAW"].sum() == 200.0
