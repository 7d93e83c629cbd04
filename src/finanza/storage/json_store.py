"""Local JSON file store for the transaction list and preferences."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from finanza.models.transaction import Transaction
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

STORE_VERSION = 1


class StoreError(Exception):
    """Exception raised when the store cannot be written."""

    pass


class TransactionStore(ABC):
    """Holds the authoritative transaction list.

    Callers replace the whole list on every change (``set``); there is no
    partial update and no merge.
    """

    @abstractmethod
    def get(self) -> list[Transaction]:
        """Return the stored transactions."""
        pass

    @abstractmethod
    def set(self, transactions: list[Transaction]) -> None:
        """Replace the stored transactions."""
        pass


class JSONTransactionStore(TransactionStore):
    """Stores transactions and preferences in one JSON document.

    Document layout::

        {"version": 1, "transactions": [...], "preferences": {...}}
    """

    def __init__(self, path: Path):
        """Initialize store.

        Args:
            path: JSON file location. It is created on first write.
        """
        self.path = path

    def get(self) -> list[Transaction]:
        """Return stored transactions; an unreadable record is dropped."""
        transactions = []
        for record in self._load().get("transactions", []):
            try:
                transactions.append(Transaction.from_dict(record))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Dropping unreadable stored transaction {record!r}: {e}")
        return transactions

    def set(self, transactions: list[Transaction]) -> None:
        """Replace the stored transactions.

        Raises:
            StoreError: If the file cannot be written.
        """
        document = self._load()
        document["transactions"] = [txn.to_dict() for txn in transactions]
        self._save(document)
        logger.debug(f"Stored {len(transactions)} transactions in {self.path}")

    def get_preference(self, key: str, default: object = None) -> object:
        """Return a stored preference, or ``default``."""
        return self._load().get("preferences", {}).get(key, default)

    def set_preference(self, key: str, value: object) -> None:
        """Store a JSON-serializable preference.

        Raises:
            StoreError: If the file cannot be written.
        """
        document = self._load()
        document.setdefault("preferences", {})[key] = value
        self._save(document)

    def clear(self) -> None:
        """Remove all data (transactions and preferences)."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Could not delete store {self.path}: {e}") from e
        logger.info(f"Cleared store {self.path}")

    def _load(self) -> dict:
        if not self.path.exists():
            return {"version": STORE_VERSION, "transactions": [], "preferences": {}}

        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read store {self.path}, starting empty: {e}")
            return {"version": STORE_VERSION, "transactions": [], "preferences": {}}

        if not isinstance(document, dict):
            logger.warning(f"Store {self.path} has unexpected layout, starting empty")
            return {"version": STORE_VERSION, "transactions": [], "preferences": {}}
        return document

    def _save(self, document: dict) -> None:
        document["version"] = STORE_VERSION
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Could not write store {self.path}: {e}") from e
