"""Configuration for the ledger service."""
import os
from dataclasses import dataclass

from utils import app_dir


APP_VERSION = "1.0.0"

COMPANY = {
    "name": "Sentiment Pharma",
    "tagline": "Payment Statement",
}

CURRENCY = "₹"

# Hard limit of the store is 500 writes per batch.
MAX_BATCH_SIZE = 500
DEFAULT_BATCH_SIZE = 450


@dataclass
class Settings:
    """Runtime settings, read from environment variables."""

    mongodb_uri: str = ""
    db_name: str = "sentiment_pharma"
    environment: str = "Production"
    base_dir: str = ""
    delete_batch_size: int = DEFAULT_BATCH_SIZE

    @property
    def logs_dir(self) -> str:
        return os.path.join(self.base_dir, "logs")

    @property
    def data_dir(self) -> str:
        return os.path.join(self.base_dir, "data")

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from environment variables.

        MONGODB_URI is not validated here; the store checks it when a
        connection is first needed.
        """
        raw_batch = (os.getenv("DELETE_BATCH_SIZE", "") or "").strip()
        try:
            batch_size = int(raw_batch) if raw_batch else DEFAULT_BATCH_SIZE
        except ValueError:
            batch_size = DEFAULT_BATCH_SIZE
        batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))

        return cls(
            mongodb_uri=(os.getenv("MONGODB_URI", "") or "").strip(),
            db_name=(os.getenv("MONGODB_DB_NAME", "sentiment_pharma") or "sentiment_pharma").strip(),
            environment=(os.getenv("APP_ENV", "Production") or "Production").strip(),
            base_dir=app_dir(),
            delete_batch_size=batch_size,
        )
