import os
from datetime import datetime
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from config import COMPANY
from ledger_pdf import PDF_CURRENCY
from models import Payment
from print_format import MISSING, format_date, format_datetime, format_money
from utils import sub_dir


def draw_company_header(c, w, y, date_text):
    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, y, COMPANY["name"].upper())
    c.setFont("Helvetica", 10)
    c.drawString(40, y - 16, COMPANY["tagline"])

    c.drawRightString(w - 40, y, "Date")
    c.setFont("Helvetica-Bold", 10)
    c.drawRightString(w - 40, y - 16, date_text)

    y -= 28
    c.line(40, y, w - 40, y)
    return y - 25


def _money(value):
    return format_money(value, PDF_CURRENCY, spaced=True)


def generate_payment_pdf(payment: Payment, out_dir: Optional[str] = None, printed_at: Optional[datetime] = None) -> str:
    out_dir = out_dir or sub_dir("reports")
    os.makedirs(out_dir, exist_ok=True)
    safe_id = str(payment.id or "payment").replace("/", "-")
    pdf_path = os.path.join(out_dir, f"payment_{safe_id}.pdf")

    c = canvas.Canvas(pdf_path, pagesize=A4)
    w, h = A4
    y = draw_company_header(c, w, h - 50, format_date(payment.date))

    # ---------- party ----------
    c.setFont("Helvetica-Bold", 10)
    c.drawString(40, y, "To")
    y -= 16
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y, (payment.party_name or MISSING).upper())
    y -= 14
    c.setFont("Helvetica", 9)
    c.drawString(40, y, payment.party_label)
    y -= 28

    # ---------- details ----------
    details = [
        ("Payment Method", payment.method),
        ("Reference", payment.reference),
        ("Account", payment.account_label),
        ("Status", payment.status),
    ]
    for i, (label, value) in enumerate(details):
        x = 40 if i % 2 == 0 else w / 2
        c.setFont("Helvetica", 9)
        c.drawString(x, y, label)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(x, y - 13, value or MISSING)
        if i % 2 == 1:
            y -= 34
    y -= 10

    # ---------- transaction table ----------
    x = [40, 140, 380, w - 40]
    c.setFont("Helvetica-Bold", 9)
    c.drawString(x[0], y, "Date")
    c.drawString(x[1], y, "Transaction")
    c.drawRightString(x[2] + 60, y, "Amount")
    c.drawRightString(x[3], y, "Balance")
    y -= 8
    c.line(40, y, w - 40, y)
    y -= 14

    method = f"({payment.method})" if payment.method else ""
    lines = [
        ("Opening Balance", 0.0, 0.0),
        (f"Payment {method}".strip(), payment.amount, payment.amount),
    ]
    c.setFont("Helvetica", 10)
    for label, amount, balance in lines:
        c.drawString(x[0], y, format_date(payment.date))
        c.drawString(x[1], y, label)
        c.drawRightString(x[2] + 60, y, _money(amount))
        c.drawRightString(x[3], y, _money(balance))
        y -= 16

    if payment.notes:
        y -= 14
        c.setFont("Helvetica-Bold", 10)
        c.drawString(40, y, "Notes")
        y -= 14
        c.setFont("Helvetica", 9)
        c.drawString(40, y, payment.notes[:120])

    c.setFont("Helvetica", 8)
    c.drawCentredString(w / 2, 40, f"Generated on {format_datetime(printed_at or datetime.now())}")

    c.showPage()
    c.save()
    return pdf_path
