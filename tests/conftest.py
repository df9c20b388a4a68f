"""Shared fixtures."""

import mongomock
import pytest

from models import Account, Transaction


@pytest.fixture(autouse=True)
def base_dir(tmp_path, monkeypatch):
    """Keep reports, logs and the audit log inside a temp directory."""
    monkeypatch.setenv("APP_BASE_DIR", str(tmp_path))
    monkeypatch.delenv("MONGODB_URI", raising=False)
    for name in ("DELETE_BATCH_SIZE", "APP_ENV", "MONGODB_DB_NAME"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def db():
    """An in-memory MongoDB database."""
    client = mongomock.MongoClient()
    yield client["sentiment_pharma_test"]
    client.close()


@pytest.fixture
def make_txn():
    counter = iter(range(1, 10_000))

    def _make(account_id, amount, type="Deposit", status="Completed", account_name="Cash"):
        return Transaction(
            id=f"t{next(counter)}",
            date="2024-04-01",
            description="entry",
            type=type,
            amount=amount,
            account_id=account_id,
            status=status,
            account_name=account_name,
        )

    return _make


@pytest.fixture
def accounts():
    return [
        Account(id="a1", account_name="Cash", opening=1000.0),
        Account(id="a2", account_name="Petty Cash", opening=-500.0),
        Account(id="a3", account_name="Cash Reserve", opening=0.0),
    ]
