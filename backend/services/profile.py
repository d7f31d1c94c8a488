"""User profile: currency preference, CSV export and data deletion."""

import logging
from typing import Any

import pandas as pd

from errors import FormValidationError
from services.identity import IdentityProvider, User
from services.store import DocumentStore
from services.transactions import TransactionService

logger = logging.getLogger(__name__)

COLLECTION = "users"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "RWF": "RWF",
}

EXPORT_COLUMNS = {
    "date": "Date",
    "description": "Description",
    "category": "Category",
    "type": "Type",
    "amount": "Amount",
}


def format_currency(amount: float, currency: str) -> str:
    """Absolute amount with the currency symbol, e.g. ``$ 12.50``."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol} {abs(amount):.2f}"


def transactions_csv(transactions: list[dict[str, Any]]) -> str:
    df = pd.DataFrame(transactions, columns=list(EXPORT_COLUMNS)).rename(columns=EXPORT_COLUMNS)
    return df.to_csv(index=False)


class ProfileService:
    def __init__(
        self,
        store: DocumentStore,
        identity: IdentityProvider,
        transactions: TransactionService,
        default_currency: str = "RWF",
    ):
        self.store = store
        self.identity = identity
        self.transactions = transactions
        self.default_currency = default_currency

    async def create_profile(self, user: User, **extra: Any) -> dict[str, Any]:
        profile = {
            "name": user.display_name,
            "email": user.email,
            "currency": self.default_currency,
            "createdAt": pd.Timestamp.now(tz="UTC").isoformat(),
            **extra,
        }
        await self.store.set(COLLECTION, user.uid, profile)
        return {"id": user.uid, **profile}

    async def get_preferences(self, user: User) -> dict[str, str]:
        profile = await self.store.get(COLLECTION, user.uid) or {}
        return {"currency": profile.get("currency") or self.default_currency}

    async def update_preferences(self, user: User, currency: str) -> dict[str, str]:
        currency = (currency or "").upper()
        if currency not in CURRENCY_SYMBOLS:
            raise FormValidationError(
                {"currency": f"Currency must be one of: {', '.join(CURRENCY_SYMBOLS)}"}
            )
        if await self.store.get(COLLECTION, user.uid) is None:
            await self.create_profile(user, currency=currency)
        else:
            await self.store.update(COLLECTION, user.uid, {"currency": currency})
        logger.info("Currency for %s set to %s", user.uid, currency)
        return {"currency": currency}

    async def export_csv(self, user_id: str) -> str:
        transactions = await self.transactions.list_transactions(user_id, force_refresh=True)
        return transactions_csv(transactions)

    async def delete_account_data(self, user: User, token: str) -> int:
        """Remove all of the user's transactions, then end the session."""
        deleted = await self.transactions.delete_all(user.uid)
        await self.identity.sign_out(token)
        return deleted
