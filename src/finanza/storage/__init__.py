"""Persistence for the transaction list."""

from finanza.storage.json_store import JSONTransactionStore, StoreError, TransactionStore

__all__ = ["TransactionStore", "JSONTransactionStore", "StoreError"]
