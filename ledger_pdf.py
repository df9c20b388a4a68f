import os
from datetime import date
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ledger import BANK_TITLE, CASH_TITLE
from models import LedgerReport
from print_format import balance_marker, format_balance, format_money
from utils import sub_dir


# Built-in PDF fonts have no rupee glyph.
PDF_CURRENCY = "Rs."

HEADERS = ["#", "ACCOUNT NAME", "OPENING(RS)", "C/D", "WITHDRAW", "DEPOSIT", "CLOSING AMOUNT", "C/D"]

BOOKS = {
    CASH_TITLE: ("Cash_Book", "View all cash account balances"),
    BANK_TITLE: ("Bank_Book", "View all bank account balances"),
}

HEADER_GREEN = colors.Color(34 / 255, 197 / 255, 94 / 255)
TOTALS_GREY = colors.Color(229 / 255, 231 / 255, 235 / 255)


def ledger_table_rows(report: LedgerReport, symbol: str = PDF_CURRENCY) -> List[List[str]]:
    """Header, one row per account, then the totals row."""
    rows = [list(HEADERS)]
    for idx, s in enumerate(report.summaries, start=1):
        rows.append([
            str(idx),
            s.account_name,
            format_balance(s.opening, symbol),
            balance_marker(s.opening),
            format_money(s.withdraw, symbol),
            format_money(s.deposit, symbol),
            format_balance(s.closing, symbol),
            balance_marker(s.closing),
        ])

    t = report.totals
    rows.append([
        "",
        report.totals_label,
        format_balance(t.opening, symbol),
        balance_marker(t.opening),
        format_money(t.withdraw, symbol),
        format_money(t.deposit, symbol),
        format_balance(t.closing, symbol),
        balance_marker(t.closing),
    ])
    return rows


def ledger_pdf_name(report: LedgerReport, today: Optional[date] = None) -> str:
    prefix = BOOKS.get(report.title, ("Ledger", ""))[0]
    stamp = (today or date.today()).isoformat()
    return f"{prefix}_{stamp}.pdf"


def generate_ledger_pdf(report: LedgerReport, out_dir: Optional[str] = None, today: Optional[date] = None) -> str:
    out_dir = out_dir or sub_dir("reports")
    os.makedirs(out_dir, exist_ok=True)
    pdf_path = os.path.join(out_dir, ledger_pdf_name(report, today))

    doc = SimpleDocTemplate(pdf_path, pagesize=A4, leftMargin=30, rightMargin=30)
    styles = getSampleStyleSheet()
    subtitle = BOOKS.get(report.title, ("", ""))[1]

    data = ledger_table_rows(report)
    table = Table(data, repeatRows=1, colWidths=[25, 140, 75, 30, 70, 70, 85, 30])
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_GREEN),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONT", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (2, 1), (2, -1), "RIGHT"),
        ("ALIGN", (4, 1), (6, -1), "RIGHT"),
        ("ALIGN", (3, 0), (3, -1), "CENTER"),
        ("ALIGN", (7, 0), (7, -1), "CENTER"),
        ("BACKGROUND", (0, -1), (-1, -1), TOTALS_GREY),
        ("FONT", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))

    doc.build([
        Paragraph(report.title, styles["Title"]),
        Paragraph(subtitle, styles["Normal"]),
        Spacer(1, 12),
        table,
    ])
    return pdf_path
