"""Cash book / bank book aggregation.

Everything here is pure: inputs are the value objects from ``models``, the
store does the fetching.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from models import (
    COMPLETED,
    DEPOSIT,
    WITHDRAWAL,
    Account,
    AccountSummary,
    Invoice,
    JournalEntry,
    LedgerReport,
    LedgerTotals,
    Transaction,
    doc_id,
)
from utils import to_float, to_text


CASH_TITLE = "Cash Accounts"
BANK_TITLE = "Bank Accounts"

# Placeholder accounts that never appear in the bank book.
EXCLUDED_BANK_NAMES = {"ABC BANK", "ABC", "TEST BANK", "TEST"}


def summarize_account(account: Account, transactions: Iterable[Transaction]) -> AccountSummary:
    withdraw = 0.0
    deposit = 0.0
    for t in transactions:
        # Literal comparison: "completed" or "COMPLETED" do not count.
        if t.account_id != account.id or t.status != COMPLETED:
            continue
        if t.type == WITHDRAWAL:
            withdraw += t.amount or 0.0
        elif t.type == DEPOSIT:
            deposit += t.amount or 0.0

    opening = account.opening or 0.0
    return AccountSummary(
        id=account.id,
        account_name=account.account_name,
        account_number=account.account_number,
        opening=opening,
        withdraw=withdraw,
        deposit=deposit,
        closing=opening + deposit - withdraw,
    )


def summarize_accounts(
    accounts: Sequence[Account], transactions: Sequence[Transaction]
) -> List[AccountSummary]:
    """One summary per account, in account order."""
    return [summarize_account(acc, transactions) for acc in accounts]


def ledger_totals(summaries: Iterable[AccountSummary]) -> LedgerTotals:
    totals = LedgerTotals()
    for s in summaries:
        totals.opening += s.opening
        totals.withdraw += s.withdraw
        totals.deposit += s.deposit
        totals.closing += s.closing
    return totals


def filter_summaries(summaries: Sequence[AccountSummary], search: str = "") -> List[AccountSummary]:
    q = (search or "").strip().lower()
    if not q:
        return list(summaries)
    return [
        s for s in summaries
        if q in s.account_name.lower()
        or (s.account_number is not None and q in s.account_number.lower())
    ]


def build_ledger(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    search: str = "",
    title: str = CASH_TITLE,
) -> LedgerReport:
    """Summaries filtered by ``search`` and the totals over what is shown."""
    summaries = filter_summaries(summarize_accounts(accounts, transactions), search)
    return LedgerReport(title=title, summaries=summaries, totals=ledger_totals(summaries))


# ---------- account classification ----------

def is_cash_account_name(name: Optional[str]) -> bool:
    return "CASH" in to_text(name).upper().strip()


def is_listed_bank_account(name: Optional[str]) -> bool:
    text = to_text(name).upper().strip()
    if not text or text in EXCLUDED_BANK_NAMES:
        return False
    return not is_cash_account_name(text)


def cash_transactions(transactions: Iterable[Transaction], accounts: Sequence[Account]) -> List[Transaction]:
    account_ids = {a.id for a in accounts}
    return [
        t for t in transactions
        if is_cash_account_name(t.account_name) and t.account_id in account_ids
    ]


def bank_transaction_from_payment_row(doc: Dict[str, Any]) -> Optional[Transaction]:
    """Map a general ``transactions`` row onto the bank book.

    Only rows tagged with a bank account are bank movements; they are
    always treated as completed.
    """
    bank_account_id = to_text(doc.get("bankAccountId"))
    if not bank_account_id:
        return None
    kind = DEPOSIT if doc.get("type") in ("Income", DEPOSIT) else WITHDRAWAL
    return Transaction(
        id=doc_id(doc),
        date=to_text(doc.get("date")),
        description=to_text(doc.get("description")),
        type=kind,
        amount=to_float(doc.get("amount")),
        account_id=bank_account_id,
        status=COMPLETED,
        account_name=to_text(doc.get("bankAccountName")) or None,
        reference=to_text(doc.get("reference")) or None,
    )


def bank_transactions(
    ledger_rows: Iterable[Transaction],
    payment_rows: Iterable[Dict[str, Any]],
    accounts: Sequence[Account],
) -> List[Transaction]:
    account_ids = {a.id for a in accounts}
    combined = [t for t in ledger_rows if not is_cash_account_name(t.account_name)]
    for row in payment_rows:
        mapped = bank_transaction_from_payment_row(row)
        if mapped is not None:
            combined.append(mapped)
    return [t for t in combined if t.account_id in account_ids]


# ---------- accounting overview ----------

def accounting_overview(entries: Sequence[JournalEntry], invoices: Sequence[Invoice]) -> Dict[str, Any]:
    income = [e for e in entries if e.type == "Income"]
    expenses = [e for e in entries if e.type == "Expense"]
    revenue = sum(e.amount or 0.0 for e in income)
    spent = sum(e.amount or 0.0 for e in expenses)
    pending = [i for i in invoices if i.status in ("Pending", "Overdue")]
    outstanding = [i for i in invoices if i.status != "Paid"]
    return {
        "revenue": round(revenue, 2),
        "expenses": round(spent, 2),
        "net_profit": round(revenue - spent, 2),
        "income_count": len(income),
        "expense_count": len(expenses),
        "pending_invoices": {
            "count": len(pending),
            "amount": round(sum(i.amount for i in pending), 2),
        },
        "outstanding": {
            "count": len(outstanding),
            "amount": round(sum(i.amount for i in outstanding), 2),
        },
    }


def accounting_export_rows(tab: str, entries: Sequence[JournalEntry], invoices: Sequence[Invoice]) -> List[Dict[str, Any]]:
    if tab == "invoices":
        return [
            {
                "Invoice No": i.invoice_no,
                "Customer": i.customer,
                "Amount": i.amount,
                "Issue Date": i.issue_date,
                "Due Date": i.due_date,
                "Status": i.status,
            }
            for i in invoices
        ]

    if tab == "income":
        selected = [e for e in entries if e.type == "Income"]
    elif tab == "expenses":
        selected = [e for e in entries if e.type == "Expense"]
    else:
        selected = list(entries)

    return [
        {
            "Date": e.date,
            "Type": e.type,
            "Amount": e.amount,
            "Category": e.category,
            "Description": e.description,
            "Status": e.status,
            "Reference": e.reference,
        }
        for e in selected
    ]
