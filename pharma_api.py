from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel
from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

import store
from audit_log import write_audit_log
from config import APP_VERSION, Settings
from exceptions import BulkDeleteError, DatabaseUnavailableError, SeedDataError
from export_excel import export_ledger_excel, export_rows_to_excel
from ledger import accounting_export_rows, accounting_overview
from ledger_pdf import generate_ledger_pdf
from log_config import setup_logging
from models import AccountSummary, LedgerReport, LedgerTotals, Payment
from payment_pdf import generate_payment_pdf
from print_format import balance_marker, format_balance, format_date, format_money


APP_TITLE = "Sentiment Pharma Ledger API"

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ACCOUNTING_TABS = {
    "overview": "accounting-transactions",
    "income": "accounting-income",
    "expenses": "accounting-expenses",
    "invoices": "accounting-invoices",
}

logger = logging.getLogger(__name__)


class DeleteAllRequest(BaseModel):
    confirm: bool = False


class SeedRequest(BaseModel):
    use_seed_dir: bool = True


def get_db() -> Database:
    return store.get_database()


def _role_guard(x_user_role: Optional[str], allowed: List[str]) -> None:
    role = (x_user_role or "").strip().lower()
    allowed_norm = {a.lower() for a in allowed}
    if role not in allowed_norm:
        raise HTTPException(status_code=403, detail="Access denied for this role.")


@contextmanager
def _surface_errors(detail: str) -> Iterator[None]:
    try:
        yield
    except DatabaseUnavailableError as exc:
        raise HTTPException(status_code=503, detail=f"Database unavailable. {exc}") from exc
    except PyMongoError as exc:
        logger.exception(detail)
        raise HTTPException(status_code=500, detail=detail) from exc


def _money_fields(opening: float, withdraw: float, deposit: float, closing: float) -> Dict[str, str]:
    return {
        "opening": format_balance(opening),
        "opening_cd": balance_marker(opening),
        "withdraw": format_money(withdraw),
        "deposit": format_money(deposit),
        "closing": format_balance(closing),
        "closing_cd": balance_marker(closing),
    }


def _summary_row(index: int, s: AccountSummary) -> Dict[str, Any]:
    return {
        "index": index,
        "id": s.id,
        "account_name": s.account_name,
        "account_number": s.account_number,
        "opening": round(s.opening, 2),
        "withdraw": round(s.withdraw, 2),
        "deposit": round(s.deposit, 2),
        "closing": round(s.closing, 2),
        "display": _money_fields(s.opening, s.withdraw, s.deposit, s.closing),
    }


def _totals_row(label: str, t: LedgerTotals) -> Dict[str, Any]:
    return {
        "label": label,
        "opening": round(t.opening, 2),
        "withdraw": round(t.withdraw, 2),
        "deposit": round(t.deposit, 2),
        "closing": round(t.closing, 2),
        "display": _money_fields(t.opening, t.withdraw, t.deposit, t.closing),
    }


def _ledger_payload(report: LedgerReport) -> Dict[str, Any]:
    return {
        "title": report.title,
        "count": len(report.summaries),
        "rows": [_summary_row(i, s) for i, s in enumerate(report.summaries, start=1)],
        "totals": _totals_row(report.totals_label, report.totals),
    }


def _payment_payload(payment: Payment) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "date": payment.date,
        "date_display": format_date(payment.date),
        "party_name": payment.party_name,
        "party_label": payment.party_label,
        "amount": payment.amount,
        "amount_display": format_money(payment.amount, spaced=True),
        "method": payment.method,
        "reference": payment.reference,
        "account": payment.account_label,
        "status": payment.status,
        "notes": payment.notes,
    }


def _file_response(path: str, media_type: str) -> FileResponse:
    return FileResponse(path, media_type=media_type, filename=os.path.basename(path))


def create_app() -> FastAPI:
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)

    @app.on_event("startup")
    def startup() -> None:
        setup_logging("api")
        try:
            db = get_db()
            db[store.LEDGER_TRANSACTIONS].create_index([("date", DESCENDING)])
            db[store.TRANSACTIONS].create_index([("createdAt", DESCENDING)])
            db[store.PAYMENTS].create_index([("createdAt", DESCENDING)])
            db[store.INVOICES].create_index([("createdAt", DESCENDING)])
        except (DatabaseUnavailableError, PyMongoError) as exc:
            logger.warning("Skipping index setup: %s", exc)

    @app.get("/")
    def root() -> Dict[str, str]:
        return {"service": "sentiment-pharma-ledger", "status": "ok", "docs": "/docs"}

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "healthy"}

    # ---------- cash / bank book ----------

    @app.get("/cash-book")
    def cash_book(search: str = "") -> Dict[str, Any]:
        with _surface_errors("Load failed: could not load cash accounts."):
            report = store.load_cash_book(get_db(), search)
        return _ledger_payload(report)

    @app.get("/cash-book/pdf")
    def cash_book_pdf(search: str = "") -> FileResponse:
        with _surface_errors("Load failed: could not load cash accounts."):
            report = store.load_cash_book(get_db(), search)
        return _file_response(generate_ledger_pdf(report), PDF_MEDIA_TYPE)

    @app.get("/cash-book/excel")
    def cash_book_excel(search: str = "") -> FileResponse:
        with _surface_errors("Load failed: could not load cash accounts."):
            report = store.load_cash_book(get_db(), search)
        return _file_response(export_ledger_excel(report), XLSX_MEDIA_TYPE)

    @app.get("/bank-book")
    def bank_book(search: str = "") -> Dict[str, Any]:
        with _surface_errors("Load failed: could not load bank accounts."):
            report = store.load_bank_book(get_db(), search)
        return _ledger_payload(report)

    @app.get("/bank-book/pdf")
    def bank_book_pdf(search: str = "") -> FileResponse:
        with _surface_errors("Load failed: could not load bank accounts."):
            report = store.load_bank_book(get_db(), search)
        return _file_response(generate_ledger_pdf(report), PDF_MEDIA_TYPE)

    # ---------- accounting ----------

    @app.get("/accounting/overview")
    def overview() -> Dict[str, Any]:
        with _surface_errors("Load failed: could not load transactions/invoices."):
            db = get_db()
            entries = store.fetch_journal_entries(db)
            invoices = store.fetch_invoices(db)
        return accounting_overview(entries, invoices)

    @app.get("/accounting/export")
    def accounting_export(tab: str = "overview") -> FileResponse:
        if tab not in ACCOUNTING_TABS:
            raise HTTPException(status_code=400, detail=f"Unknown tab '{tab}'.")
        with _surface_errors("Load failed: could not load transactions/invoices."):
            db = get_db()
            entries = store.fetch_journal_entries(db)
            invoices = store.fetch_invoices(db) if tab == "invoices" else []
        rows = accounting_export_rows(tab, entries, invoices)
        path = export_rows_to_excel(rows, ACCOUNTING_TABS[tab], sheet_name="Accounting")
        return _file_response(path, XLSX_MEDIA_TYPE)

    # ---------- payments ----------

    def _require_payment(payment_id: str) -> Payment:
        with _surface_errors("Load failed: could not load payment."):
            payment = store.get_payment(get_db(), payment_id)
        if payment is None:
            raise HTTPException(status_code=404, detail="Payment record not found.")
        return payment

    @app.get("/payments/{payment_id}")
    def payment_view(payment_id: str) -> Dict[str, Any]:
        return _payment_payload(_require_payment(payment_id))

    @app.get("/payments/{payment_id}/pdf")
    def payment_pdf(payment_id: str) -> FileResponse:
        payment = _require_payment(payment_id)
        return _file_response(generate_payment_pdf(payment), PDF_MEDIA_TYPE)

    # ---------- settings ----------

    @app.get("/settings/status")
    def settings_status() -> Dict[str, str]:
        settings = Settings.load()
        try:
            get_db().list_collection_names()
            status = "Connected"
        except (DatabaseUnavailableError, PyMongoError):
            status = "Disconnected"
        return {"version": f"v{APP_VERSION}", "database": status, "environment": settings.environment}

    @app.post("/settings/delete-all")
    def delete_all(
        payload: DeleteAllRequest,
        x_user_role: Optional[str] = Header(default=None),
        x_user_name: Optional[str] = Header(default=None),
    ) -> Dict[str, Any]:
        _role_guard(x_user_role, ["admin"])
        if not payload.confirm:
            raise HTTPException(status_code=400, detail="Deletion must be confirmed.")

        settings = Settings.load()
        user = x_user_name or "web_user"
        try:
            with _surface_errors("Delete failed: could not delete all data. Some records may remain."):
                counts = store.delete_all_data(get_db(), batch_size=settings.delete_batch_size)
        except BulkDeleteError as exc:
            write_audit_log(
                user=user,
                module="settings",
                action="delete_all_failed",
                reference=exc.collection,
                after={"deleted": exc.deleted},
            )
            raise HTTPException(
                status_code=500,
                detail=(
                    "Delete failed: could not delete all data. Some records may remain. "
                    f"{exc.deleted} records were removed before the failure."
                ),
            ) from exc

        total = sum(counts.values())
        write_audit_log(user=user, module="settings", action="delete_all", after=counts)
        return {
            "ok": True,
            "deleted": counts,
            "total": total,
            "message": f"All data deleted successfully. {total} records removed.",
        }

    @app.post("/settings/seed")
    def seed(
        payload: Optional[SeedRequest] = None,
        x_user_role: Optional[str] = Header(default=None),
        x_user_name: Optional[str] = Header(default=None),
    ) -> Dict[str, Any]:
        _role_guard(x_user_role, ["admin"])
        payload = payload or SeedRequest()
        settings = Settings.load()
        seed_dir = store.seed_dir_default(settings)

        try:
            data = store.load_seed_dir(seed_dir) if payload.use_seed_dir and os.path.isdir(seed_dir) else {}
        except SeedDataError as exc:
            raise HTTPException(status_code=400, detail=f"Add failed: {exc}") from exc

        with _surface_errors("Add failed: could not seed the database."):
            counts = store.seed_database(get_db(), data)

        write_audit_log(user=x_user_name or "web_user", module="settings", action="seed", after=counts)
        return {"ok": True, "seeded": counts, "total": sum(counts.values())}

    return app


app = create_app()
