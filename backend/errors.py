"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FinanceTrackerError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class NotAuthenticatedError(FinanceTrackerError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class FormValidationError(FinanceTrackerError):
    """One or more form fields failed validation; ``fields`` maps field -> message."""

    def __init__(self, fields: dict[str, str]):
        super().__init__("Validation failed", status_code=422)
        self.fields = fields


class AuthenticationError(FinanceTrackerError):
    """Identity provider rejected a sign-in or sign-up, attributed to one form field."""

    def __init__(self, field: str, message: str, status_code: int = 401):
        super().__init__(message, status_code=status_code)
        self.fields = {field: message}


class NotFoundError(FinanceTrackerError):
    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} not found: {item_id}", status_code=404)


class TransactionNotFoundError(NotFoundError):
    def __init__(self, tx_id: str):
        super().__init__("Transaction", tx_id)


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str):
        super().__init__("Category", category_id)


class DocumentNotFoundError(NotFoundError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__("Document", f"{collection}/{doc_id}")


class DocumentStoreError(FinanceTrackerError):
    def __init__(self, message: str):
        super().__init__(f"Document store error: {message}", status_code=502)


class IdentityProviderError(FinanceTrackerError):
    """Provider failure carrying a Firebase-style code such as ``auth/wrong-password``."""

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code, status_code=400)
        self.code = code


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(FinanceTrackerError)
    async def handle_tracker_error(_request: Request, exc: FinanceTrackerError):
        body = {"error": str(exc)}
        fields = getattr(exc, "fields", None)
        if fields:
            body["fields"] = fields
        return JSONResponse(body, status_code=exc.status_code)

    @app.exception_handler(ValueError)
    async def handle_value_error(_request: Request, exc: ValueError):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
