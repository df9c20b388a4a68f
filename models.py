"""Value objects passed between the store, the ledger and the report writers."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from utils import to_float, to_text


DEPOSIT = "Deposit"
WITHDRAWAL = "Withdrawal"
COMPLETED = "Completed"


def doc_id(doc: Dict[str, Any]) -> str:
    return to_text(doc.get("_id", doc.get("id", "")))


def _optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class Account:
    """A cash or bank account. Opening is credit-positive."""

    id: str
    account_name: str
    opening: float = 0.0
    account_number: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Account":
        return cls(
            id=doc_id(doc),
            account_name=to_text(doc.get("accountName")),
            opening=to_float(doc.get("opening")),
            account_number=_optional_text(doc.get("accountNumber")),
        )


@dataclass(frozen=True)
class Transaction:
    """A ledger movement against one account."""

    id: str
    date: str
    description: str
    type: str
    amount: float
    account_id: str
    status: str = COMPLETED
    account_name: Optional[str] = None
    reference: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Transaction":
        return cls(
            id=doc_id(doc),
            date=to_text(doc.get("date")),
            description=to_text(doc.get("description")),
            type=to_text(doc.get("type") or DEPOSIT),
            amount=to_float(doc.get("amount")),
            account_id=to_text(doc.get("accountId")),
            status=to_text(doc.get("status") or COMPLETED),
            account_name=_optional_text(doc.get("accountName")),
            reference=_optional_text(doc.get("reference")),
        )


@dataclass
class AccountSummary:
    id: str
    account_name: str
    opening: float
    withdraw: float
    deposit: float
    closing: float
    account_number: Optional[str] = None


@dataclass
class LedgerTotals:
    opening: float = 0.0
    withdraw: float = 0.0
    deposit: float = 0.0
    closing: float = 0.0


@dataclass
class LedgerReport:
    """Summaries plus their totals row, ready for display or export."""

    title: str
    summaries: List[AccountSummary] = field(default_factory=list)
    totals: LedgerTotals = field(default_factory=LedgerTotals)

    @property
    def totals_label(self) -> str:
        return f"Sum of: {self.title}"


@dataclass
class Payment:
    id: str
    date: str = ""
    party_name: str = ""
    party_type: str = "other"
    amount: float = 0.0
    method: str = ""
    reference: str = ""
    bank_account_name: str = ""
    cash_account_name: str = ""
    notes: str = ""
    status: str = ""

    @property
    def party_label(self) -> str:
        if self.party_type == "supplier":
            return "Supplier"
        if self.party_type == "customer":
            return "Customer"
        return "Party"

    @property
    def account_label(self) -> str:
        return self.bank_account_name or self.cash_account_name

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Payment":
        return cls(
            id=doc_id(doc),
            date=to_text(doc.get("date")),
            party_name=to_text(doc.get("partyName")),
            party_type=to_text(doc.get("partyType") or "other"),
            amount=to_float(doc.get("amount")),
            method=to_text(doc.get("method")),
            reference=to_text(doc.get("reference")),
            bank_account_name=to_text(doc.get("bankAccountName")),
            cash_account_name=to_text(doc.get("cashAccountName")),
            notes=to_text(doc.get("notes")),
            status=to_text(doc.get("status")),
        )


@dataclass
class Invoice:
    id: str
    invoice_no: str
    customer: str
    amount: float
    issue_date: str
    due_date: str
    status: str = "Pending"

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Invoice":
        amount = doc.get("total")
        if not isinstance(amount, (int, float)):
            amount = doc.get("amount", amount)
        return cls(
            id=doc_id(doc),
            invoice_no=to_text(doc.get("invoiceNo")),
            customer=to_text(doc.get("partyName") or doc.get("customer")),
            amount=to_float(amount),
            issue_date=to_text(doc.get("issueDate") or doc.get("date")),
            due_date=to_text(doc.get("dueDate")),
            status=to_text(doc.get("status") or "Pending"),
        )


@dataclass
class JournalEntry:
    """A row of the general transactions collection (Income/Expense)."""

    id: str
    date: str
    description: str
    category: str
    amount: float
    type: str
    status: str = COMPLETED
    reference: str = ""

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "JournalEntry":
        return cls(
            id=doc_id(doc),
            date=to_text(doc.get("date")),
            description=to_text(doc.get("description")),
            category=to_text(doc.get("category") or "General"),
            amount=to_float(doc.get("amount")),
            type=to_text(doc.get("type") or "Income"),
            status=to_text(doc.get("status") or COMPLETED),
            reference=to_text(doc.get("reference")),
        )
