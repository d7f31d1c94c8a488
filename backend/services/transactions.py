"""Transaction reads and writes, fronted by the per-user cache.

Reads go through the cache unless the caller forces a refresh; every
completed write invalidates the writer's entry so the next read refetches.
"""

import logging
import math
from datetime import date
from typing import Any, Callable

from errors import FormValidationError, TransactionNotFoundError
from services.cache import TransactionCache
from services.store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "transactions"
TRANSACTION_TYPES = ("income", "expense")


def parse_iso_date(value: str) -> date | None:
    """Parse a YYYY-MM-DD string, returning None when it is not one."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def signed_amount(amount: float, tx_type: str) -> float:
    """Expenses are stored negative, income positive."""
    return -abs(amount) if tx_type == "expense" else abs(amount)


def validate_transaction(
    description: str,
    amount: Any,
    category: str,
    tx_type: str,
    tx_date: str | None = None,
) -> dict[str, Any]:
    """Validate form input and return the normalized document fields."""
    errors: dict[str, str] = {}
    description = (description or "").strip()
    category = (category or "").strip()

    if not description:
        errors["description"] = "Description is required"

    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = None
    if value is None or not math.isfinite(value):
        errors["amount"] = "Amount must be a number"
    elif value <= 0:
        errors["amount"] = "Amount must be greater than zero"

    if not category:
        errors["category"] = "Category is required"
    if tx_type not in TRANSACTION_TYPES:
        errors["type"] = f"Type must be one of: {', '.join(TRANSACTION_TYPES)}"
    if tx_date is not None and parse_iso_date(tx_date) is None:
        errors["date"] = "Date must be in YYYY-MM-DD format"

    if errors:
        raise FormValidationError(errors)

    fields = {
        "description": description,
        "amount": signed_amount(value, tx_type),
        "category": category,
        "type": tx_type,
    }
    if tx_date is not None:
        fields["date"] = tx_date
    return fields


class TransactionService:
    def __init__(
        self,
        store: DocumentStore,
        cache: TransactionCache,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.cache = cache
        self.today = today

    async def list_transactions(self, user_id: str, force_refresh: bool = False) -> list[dict[str, Any]]:
        """User's transactions, newest first. Served from cache within the TTL."""
        if not force_refresh:
            cached = self.cache.get(user_id)
            if cached is not None:
                logger.debug("Cache hit for %s", user_id)
                return cached

        transactions = await self.store.query(
            COLLECTION, {"userId": user_id}, order_by="date", descending=True
        )
        self.cache.set(user_id, transactions)
        return transactions

    async def get_transaction(self, user_id: str, tx_id: str, force_refresh: bool = False) -> dict[str, Any]:
        for tx in await self.list_transactions(user_id, force_refresh=force_refresh):
            if tx["id"] == tx_id:
                return tx
        raise TransactionNotFoundError(tx_id)

    async def _owned(self, user_id: str, tx_id: str) -> dict[str, Any]:
        doc = await self.store.get(COLLECTION, tx_id)
        if doc is None or doc.get("userId") != user_id:
            raise TransactionNotFoundError(tx_id)
        return doc

    async def create_transaction(
        self,
        user_id: str,
        description: str,
        amount: Any,
        category: str,
        tx_type: str,
        tx_date: str | None = None,
    ) -> dict[str, Any]:
        fields = validate_transaction(description, amount, category, tx_type, tx_date)
        fields.setdefault("date", self.today().isoformat())
        fields["userId"] = user_id

        tx_id = await self.store.add(COLLECTION, fields)
        self.cache.invalidate(user_id)
        logger.info("Created transaction %s for %s", tx_id, user_id)
        return {"id": tx_id, **fields}

    async def update_transaction(
        self,
        user_id: str,
        tx_id: str,
        description: str,
        amount: Any,
        category: str,
        tx_type: str,
        tx_date: str | None = None,
    ) -> dict[str, Any]:
        existing = await self._owned(user_id, tx_id)
        fields = validate_transaction(description, amount, category, tx_type, tx_date)

        await self.store.update(COLLECTION, tx_id, fields)
        self.cache.invalidate(user_id)
        logger.info("Updated transaction %s for %s", tx_id, user_id)
        return {**existing, **fields}

    async def delete_transaction(self, user_id: str, tx_id: str) -> None:
        await self._owned(user_id, tx_id)
        await self.store.delete(COLLECTION, tx_id)
        self.cache.invalidate(user_id)
        logger.info("Deleted transaction %s for %s", tx_id, user_id)

    async def delete_all(self, user_id: str) -> int:
        """Delete every transaction the user owns. Returns how many were removed."""
        docs = await self.store.query(COLLECTION, {"userId": user_id})
        for doc in docs:
            await self.store.delete(COLLECTION, doc["id"])
        self.cache.invalidate(user_id)
        logger.info("Deleted %d transactions for %s", len(docs), user_id)
        return len(docs)
