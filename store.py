from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from bulk_delete import delete_in_batches
from config import DEFAULT_BATCH_SIZE, Settings
from exceptions import BulkDeleteError, DatabaseUnavailableError, SeedDataError
from ledger import (
    BANK_TITLE,
    CASH_TITLE,
    bank_transactions,
    build_ledger,
    cash_transactions,
    is_listed_bank_account,
)
from models import Account, Invoice, JournalEntry, LedgerReport, Payment, Transaction
from utils import now_str


logger = logging.getLogger(__name__)

CASH_ACCOUNTS = "cashAccounts"
BANK_ACCOUNTS = "bankAccounts"
LEDGER_TRANSACTIONS = "accountingTransactions"
TRANSACTIONS = "transactions"
PAYMENTS = "payments"
INVOICES = "invoices"

# Wiped by the settings "delete all data" action.
WIPE_COLLECTIONS = [
    "batches",
    "rawInventory",
    "processedInventory",
    "itemNameSuggestions",
]

SEED_KEYS = {
    CASH_ACCOUNTS: "accountName",
    BANK_ACCOUNTS: "accountName",
    "itemNameSuggestions": "name",
    INVOICES: "invoiceNo",
}

DEFAULT_CASH_ACCOUNT = {"accountName": "Cash", "opening": 0}

DEFAULT_SEED = {
    CASH_ACCOUNTS: [DEFAULT_CASH_ACCOUNT],
}

_client: Optional[MongoClient] = None


def get_client(settings: Optional[Settings] = None) -> MongoClient:
    global _client
    if _client is None:
        settings = settings or Settings.load()
        if not settings.mongodb_uri:
            raise DatabaseUnavailableError("MONGODB_URI is not configured.")
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_database(settings: Optional[Settings] = None) -> Database:
    settings = settings or Settings.load()
    return get_client(settings)[settings.db_name]


def _id_candidates(value: str) -> List[Any]:
    candidates: List[Any] = [value]
    if ObjectId.is_valid(value):
        candidates.insert(0, ObjectId(value))
    return candidates


# ---------- ledger reads ----------

def fetch_cash_accounts(db: Database) -> List[Account]:
    """Cash accounts; a default "Cash" account is created when there are none."""
    accounts = [Account.from_doc(d) for d in db[CASH_ACCOUNTS].find({})]
    if accounts:
        return accounts

    row = dict(DEFAULT_CASH_ACCOUNT, createdAt=now_str())
    result = db[CASH_ACCOUNTS].insert_one(row)
    logger.info("Created default cash account %s", result.inserted_id)
    return [Account(id=str(result.inserted_id), account_name=row["accountName"], opening=0.0)]


def fetch_bank_accounts(db: Database) -> List[Account]:
    accounts = [Account.from_doc(d) for d in db[BANK_ACCOUNTS].find({})]
    return [a for a in accounts if is_listed_bank_account(a.account_name)]


def fetch_ledger_transactions(db: Database) -> List[Transaction]:
    cursor = db[LEDGER_TRANSACTIONS].find({}).sort("date", DESCENDING)
    return [Transaction.from_doc(d) for d in cursor]


def load_cash_book(db: Database, search: str = "") -> LedgerReport:
    accounts = fetch_cash_accounts(db)
    transactions = cash_transactions(fetch_ledger_transactions(db), accounts)
    return build_ledger(accounts, transactions, search=search, title=CASH_TITLE)


def load_bank_book(db: Database, search: str = "") -> LedgerReport:
    accounts = fetch_bank_accounts(db)
    payment_rows = db[TRANSACTIONS].find({}).sort("createdAt", DESCENDING)
    transactions = bank_transactions(fetch_ledger_transactions(db), payment_rows, accounts)
    return build_ledger(accounts, transactions, search=search, title=BANK_TITLE)


def fetch_journal_entries(db: Database) -> List[JournalEntry]:
    cursor = db[TRANSACTIONS].find({}).sort("createdAt", DESCENDING)
    return [JournalEntry.from_doc(d) for d in cursor]


def fetch_invoices(db: Database) -> List[Invoice]:
    cursor = db[INVOICES].find({}).sort("createdAt", DESCENDING)
    return [Invoice.from_doc(d) for d in cursor]


def get_payment(db: Database, payment_id: str) -> Optional[Payment]:
    """The payment, or None when no such document exists."""
    doc = db[PAYMENTS].find_one({"_id": {"$in": _id_candidates(payment_id)}})
    if doc is None:
        return None
    return Payment.from_doc(doc)


# ---------- delete all ----------

def delete_collection(db: Database, name: str, batch_size: int = DEFAULT_BATCH_SIZE) -> int:
    coll = db[name]
    try:
        ids = [d["_id"] for d in coll.find({}, {"_id": 1})]
    except PyMongoError as exc:
        logger.error("Cannot list documents in %s: %s", name, exc)
        raise BulkDeleteError(f"Cannot list documents in {name}: {exc}", collection=name) from exc
    logger.info("Deleting %d documents from %s...", len(ids), name)

    def commit(chunk: List[Any]) -> int:
        return coll.delete_many({"_id": {"$in": chunk}}).deleted_count

    deleted = delete_in_batches(ids, commit, batch_size=batch_size, label=name)
    logger.info("Deleted %d documents from %s", deleted, name)
    return deleted


def delete_all_data(
    db: Database,
    batch_size: int = DEFAULT_BATCH_SIZE,
    collections: Iterable[str] = WIPE_COLLECTIONS,
) -> Dict[str, int]:
    """Empty ``collections`` one after another.

    Not atomic: on failure BulkDeleteError.deleted holds the running
    total across every collection processed so far.
    """
    counts: Dict[str, int] = {}
    total = 0
    for name in collections:
        try:
            counts[name] = delete_collection(db, name, batch_size)
        except BulkDeleteError as exc:
            raise BulkDeleteError(str(exc), deleted=total + exc.deleted, collection=name) from exc
        total += counts[name]
    return counts


# ---------- seeding ----------

def read_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SeedDataError(f"Cannot read seed file {path.name}: {exc}") from exc


def to_list(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, list):
        return [v for v in value if isinstance(v, dict)]
    if isinstance(value, dict):
        return [value]
    return []


def load_seed_dir(data_dir: str) -> Dict[str, List[Dict[str, Any]]]:
    """Seed rows keyed by collection, one ``<collection>.json`` per collection."""
    base = Path(data_dir)
    if not base.is_dir():
        raise SeedDataError(f"Seed directory not found: {data_dir}")
    return {path.stem: to_list(read_json(path)) for path in sorted(base.glob("*.json"))}


def upsert_many(coll: Collection, rows: Iterable[Dict[str, Any]], key_field: Optional[str]) -> int:
    written = 0
    for row in rows:
        row = {k: v for k, v in row.items() if k != "_id"}
        key = str(row.get(key_field, "")).strip() if key_field else ""
        if not key:
            row.setdefault("createdAt", now_str())
            coll.insert_one(row)
            written += 1
            continue
        update: Dict[str, Any] = {"$set": row}
        if "createdAt" not in row:
            update["$setOnInsert"] = {"createdAt": now_str()}
        coll.update_one({key_field: row[key_field]}, update, upsert=True)
        written += 1
    return written


def seed_database(db: Database, data: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> Dict[str, int]:
    """Upsert seed rows; the default cash account is always present afterwards."""
    data = dict(data or {})
    if not data.get(CASH_ACCOUNTS) and db[CASH_ACCOUNTS].count_documents({}, limit=1) == 0:
        data[CASH_ACCOUNTS] = list(DEFAULT_SEED[CASH_ACCOUNTS])

    counts: Dict[str, int] = {}
    for name, rows in data.items():
        counts[name] = upsert_many(db[name], rows, SEED_KEYS.get(name))
        logger.info("Seeded %d rows into %s", counts[name], name)
    return counts


def seed_dir_default(settings: Settings) -> str:
    return os.path.join(settings.data_dir, "seed")
