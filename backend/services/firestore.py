"""Cloud Firestore client over the v1 REST API.

Firestore stores typed values ({"stringValue": "..."} etc.), so documents are
encoded on the way in and decoded on the way out. Auth is either a bearer
access token (service credentials) or the project's web API key.
"""

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from errors import DocumentNotFoundError, DocumentStoreError
from services.store import DocumentStore

logger = logging.getLogger(__name__)

FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value as a Firestore typed value."""
    # bool before int: bool is an int subclass
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": value.isoformat()}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise ValueError(f"Unsupported Firestore value type: {type(value).__name__}")


def decode_value(value: dict[str, Any]) -> Any:
    """Decode a Firestore typed value. Timestamps come back as ISO strings."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {key: encode_value(val) for key, val in data.items()}


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(val) for key, val in fields.items()}


def decode_document(document: dict[str, Any]) -> dict[str, Any]:
    """Turn a Firestore document resource into a plain dict with its id."""
    doc_id = document["name"].rsplit("/", 1)[-1]
    return {"id": doc_id, **decode_fields(document.get("fields", {}))}


def _build_where(filters: dict[str, Any]) -> dict[str, Any] | None:
    clauses = [
        {
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": "EQUAL",
                "value": encode_value(value),
            }
        }
        for field, value in filters.items()
    ]
    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return {"compositeFilter": {"op": "AND", "filters": clauses}}


class FirestoreDocumentStore(DocumentStore):
    name = "firestore"

    def __init__(
        self,
        project_id: str,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.project_id = project_id
        self._api_key = api_key
        self._access_token = access_token
        self._timeout = timeout
        self._transport = transport

    @property
    def documents_path(self) -> str:
        return f"/projects/{self.project_id}/databases/(default)/documents"

    def _path(self, collection: str, doc_id: str | None = None) -> str:
        """Document or collection path with each segment URL-quoted."""
        segments = [collection] if doc_id is None else [collection, doc_id]
        return "/".join([self.documents_path] + [quote(s, safe="") for s in segments])

    async def _request(
        self,
        method: str,
        path: str,
        params: list[tuple[str, str]] | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        """Send one request. 404 responses are returned for the caller to interpret."""
        params = list(params or [])
        if self._api_key:
            params.append(("key", self._api_key))
        headers = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            async with httpx.AsyncClient(
                base_url=FIRESTORE_BASE_URL, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Firestore %s %s failed: %s", method, path, e)
            raise DocumentStoreError(str(e)) from e

        if resp.status_code == 404:
            return resp
        if resp.is_error:
            logger.error("Firestore %s %s returned %d: %s", method, path, resp.status_code, resp.text)
            raise DocumentStoreError(f"HTTP {resp.status_code}")
        return resp

    async def query(self, collection, filters, order_by=None, descending=False, limit=None):
        structured: dict[str, Any] = {"from": [{"collectionId": collection}]}
        where = _build_where(filters)
        if where:
            structured["where"] = where
        if order_by:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": order_by},
                    "direction": "DESCENDING" if descending else "ASCENDING",
                }
            ]
        if limit is not None:
            structured["limit"] = limit

        resp = await self._request(
            "POST", f"{self.documents_path}:runQuery", json={"structuredQuery": structured}
        )
        if resp.status_code == 404:
            return []
        # runQuery streams one row per result; rows without "document" carry only read metadata
        return [decode_document(row["document"]) for row in resp.json() if "document" in row]

    async def get(self, collection, doc_id):
        resp = await self._request("GET", self._path(collection, doc_id))
        if resp.status_code == 404:
            return None
        return decode_document(resp.json())

    async def add(self, collection, data):
        resp = await self._request(
            "POST", self._path(collection), json={"fields": encode_fields(data)}
        )
        if resp.status_code == 404:
            raise DocumentStoreError(f"Collection path not found: {collection}")
        doc_id = resp.json()["name"].rsplit("/", 1)[-1]
        logger.info("Created %s/%s", collection, doc_id)
        return doc_id

    async def set(self, collection, doc_id, data):
        resp = await self._request(
            "PATCH", self._path(collection, doc_id), json={"fields": encode_fields(data)}
        )
        if resp.status_code == 404:
            raise DocumentStoreError(f"Collection path not found: {collection}")

    async def update(self, collection, doc_id, data):
        params = [("updateMask.fieldPaths", field) for field in data]
        params.append(("currentDocument.exists", "true"))
        resp = await self._request(
            "PATCH",
            self._path(collection, doc_id),
            params=params,
            json={"fields": encode_fields(data)},
        )
        if resp.status_code == 404:
            raise DocumentNotFoundError(collection, doc_id)

    async def delete(self, collection, doc_id):
        await self._request("DELETE", self._path(collection, doc_id))
