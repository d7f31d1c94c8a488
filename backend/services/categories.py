"""User categories: defaults seeded at sign-up, grouped listing, CRUD."""

import logging
from datetime import datetime, timezone
from typing import Any

from errors import CategoryNotFoundError, FormValidationError
from services.store import DocumentStore
from services.transactions import TRANSACTION_TYPES

logger = logging.getLogger(__name__)

COLLECTION = "categories"

DEFAULT_CATEGORIES = [
    {"name": "Food", "type": "expense", "icon": "🍔"},
    {"name": "Transportation", "type": "expense", "icon": "🚗"},
    {"name": "Entertainment", "type": "expense", "icon": "🎬"},
    {"name": "Shopping", "type": "expense", "icon": "🛍️"},
    {"name": "Bills", "type": "expense", "icon": "💡"},
    {"name": "Salary", "type": "income", "icon": "💰"},
    {"name": "Freelance", "type": "income", "icon": "💻"},
]

# Icons shown next to transaction rows, keyed by category label
TRANSACTION_ICONS = {
    "Food": "🍽️",
    "Transportation": "🚗",
    "Entertainment": "🎬",
    "Utilities": "💡",
    "Salary": "💰",
    "Freelance": "💼",
}
FALLBACK_ICON = "💳"


def category_icon(category: str) -> str:
    return TRANSACTION_ICONS.get(category, FALLBACK_ICON)


def validate_category(name: str, category_type: str, icon: str) -> dict[str, str]:
    errors = {}
    name = (name or "").strip()
    if not name:
        errors["name"] = "Category name is required"
    if category_type not in TRANSACTION_TYPES:
        errors["type"] = f"Type must be one of: {', '.join(TRANSACTION_TYPES)}"
    if not icon:
        errors["icon"] = "Please select an icon"
    if errors:
        raise FormValidationError(errors)
    return {"name": name, "type": category_type, "icon": icon}


class CategoryService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def seed_defaults(self, user_id: str) -> None:
        created_at = datetime.now(timezone.utc).isoformat()
        for category in DEFAULT_CATEGORIES:
            await self.store.add(COLLECTION, {**category, "userId": user_id, "createdAt": created_at})
        logger.info("Seeded %d default categories for %s", len(DEFAULT_CATEGORIES), user_id)

    async def list_categories(self, user_id: str) -> list[dict[str, Any]]:
        return await self.store.query(COLLECTION, {"userId": user_id})

    async def list_grouped(self, user_id: str) -> dict[str, Any]:
        """Split into income and expense lists; anything not income counts as expense."""
        income, expense = [], []
        for category in await self.list_categories(user_id):
            (income if category.get("type") == "income" else expense).append(category)
        return {
            "income": income,
            "expense": expense,
            "income_count": len(income),
            "expense_count": len(expense),
        }

    async def _owned(self, user_id: str, category_id: str) -> dict[str, Any]:
        doc = await self.store.get(COLLECTION, category_id)
        if doc is None or doc.get("userId") != user_id:
            raise CategoryNotFoundError(category_id)
        return doc

    async def create(self, user_id: str, name: str, category_type: str, icon: str) -> dict[str, Any]:
        fields = validate_category(name, category_type, icon)
        fields["userId"] = user_id
        fields["createdAt"] = datetime.now(timezone.utc).isoformat()
        category_id = await self.store.add(COLLECTION, fields)
        logger.info("Created category %s for %s", category_id, user_id)
        return {"id": category_id, **fields}

    async def update(
        self, user_id: str, category_id: str, name: str, category_type: str, icon: str
    ) -> dict[str, Any]:
        existing = await self._owned(user_id, category_id)
        fields = validate_category(name, category_type, icon)
        await self.store.update(COLLECTION, category_id, fields)
        return {**existing, **fields}

    async def delete(self, user_id: str, category_id: str) -> None:
        await self._owned(user_id, category_id)
        await self.store.delete(COLLECTION, category_id)
        logger.info("Deleted category %s for %s", category_id, user_id)
