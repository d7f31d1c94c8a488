"""Document store interface and the in-memory implementation.

Documents are plain dicts. Reads return a copy with the generated
identifier merged in under ``"id"``.
"""

import copy
import logging
import uuid
from typing import Any

from errors import DocumentNotFoundError

logger = logging.getLogger(__name__)


class DocumentStore:
    """Async document database consumed by the services."""

    name = "abstract"

    async def query(
        self,
        collection: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        raise NotImplementedError

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        raise NotImplementedError

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        raise NotImplementedError

    async def delete(self, collection: str, doc_id: str) -> None:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Process-local store for development and tests. Nothing survives a restart."""

    name = "memory"

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _docs(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _with_id(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return {"id": doc_id, **copy.deepcopy(data)}

    async def query(self, collection, filters, order_by=None, descending=False, limit=None):
        results = [
            self._with_id(doc_id, data)
            for doc_id, data in self._docs(collection).items()
            if all(data.get(field) == value for field, value in filters.items())
        ]
        if order_by:
            results.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by)), reverse=descending)
        if limit is not None:
            results = results[:limit]
        return results

    async def get(self, collection, doc_id):
        data = self._docs(collection).get(doc_id)
        return self._with_id(doc_id, data) if data is not None else None

    async def add(self, collection, data):
        doc_id = uuid.uuid4().hex
        self._docs(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def set(self, collection, doc_id, data):
        self._docs(collection)[doc_id] = copy.deepcopy(data)

    async def update(self, collection, doc_id, data):
        docs = self._docs(collection)
        if doc_id not in docs:
            raise DocumentNotFoundError(collection, doc_id)
        docs[doc_id].update(copy.deepcopy(data))

    async def delete(self, collection, doc_id):
        self._docs(collection).pop(doc_id, None)
