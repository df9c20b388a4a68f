# export_excel.py
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from ledger_pdf import BOOKS
from models import LedgerReport
from print_format import balance_marker
from utils import sub_dir


def excel_file_name(file_name: str) -> str:
    return file_name if file_name.lower().endswith(".xlsx") else f"{file_name}.xlsx"


def export_rows_to_excel(
    rows: List[Dict[str, Any]],
    file_name: str,
    sheet_name: str = "Sheet1",
    out_dir: Optional[str] = None,
) -> str:
    out_dir = out_dir or sub_dir("reports")
    os.makedirs(out_dir, exist_ok=True)
    file_path = os.path.join(out_dir, excel_file_name(file_name))

    df = pd.DataFrame(rows or [])
    df.to_excel(file_path, index=False, sheet_name=sheet_name, engine="openpyxl")
    return file_path


def _ledger_excel_row(index: Any, name: str, opening: float, withdraw: float, deposit: float, closing: float) -> Dict[str, Any]:
    return {
        "#": index,
        "ACCOUNT NAME": name,
        "OPENING": round(opening, 2),
        "OPENING C/D": balance_marker(opening),
        "WITHDRAW": round(withdraw, 2),
        "DEPOSIT": round(deposit, 2),
        "CLOSING AMOUNT": round(closing, 2),
        "CLOSING C/D": balance_marker(closing),
    }


def export_ledger_excel(report: LedgerReport, out_dir: Optional[str] = None) -> str:
    """Ledger sheet with numeric amount columns; the sign carries debit balances."""
    rows = [
        _ledger_excel_row(i, s.account_name, s.opening, s.withdraw, s.deposit, s.closing)
        for i, s in enumerate(report.summaries, start=1)
    ]
    t = report.totals
    rows.append(_ledger_excel_row("", report.totals_label, t.opening, t.withdraw, t.deposit, t.closing))
    prefix = BOOKS.get(report.title, ("Ledger", ""))[0]
    return export_rows_to_excel(rows, prefix, sheet_name=report.title, out_dir=out_dir)
