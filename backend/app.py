"""FastAPI application entry point for the finance tracker API.

``create_app`` is the composition root: it builds the document store,
identity provider and the single transaction cache, and hands them to the
services that the routes use.
"""

import logging
import sys

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings
from dependencies import Services
from errors import register_error_handlers
from services.accounts import AccountService
from services.cache import TransactionCache
from services.categories import CategoryService
from services.firestore import FirestoreDocumentStore
from services.identity import FirebaseIdentityProvider, IdentityProvider, InMemoryIdentityProvider
from services.profile import ProfileService
from services.store import DocumentStore, InMemoryDocumentStore
from services.transactions import TransactionService

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def build_store(config: Settings) -> DocumentStore:
    if config.backend == "firebase":
        return FirestoreDocumentStore(
            project_id=config.firebase_project_id,
            api_key=config.firebase_api_key,
            access_token=config.firestore_access_token,
            timeout=config.http_timeout_seconds,
        )
    return InMemoryDocumentStore()


def build_identity(config: Settings) -> IdentityProvider:
    if config.backend == "firebase" and config.firebase_api_key:
        return FirebaseIdentityProvider(api_key=config.firebase_api_key, timeout=config.http_timeout_seconds)
    return InMemoryIdentityProvider()


def create_app(
    config: Settings | None = None,
    store: DocumentStore | None = None,
    identity: IdentityProvider | None = None,
    cache: TransactionCache | None = None,
) -> FastAPI:
    config = config or settings
    if store is None:
        store = build_store(config)
    if identity is None:
        identity = build_identity(config)
    # TransactionCache defines __len__: an empty one is falsy
    if cache is None:
        cache = TransactionCache(ttl_seconds=config.cache_ttl_seconds)

    transactions = TransactionService(store, cache)
    categories = CategoryService(store)
    profiles = ProfileService(store, identity, transactions, default_currency=config.default_currency)
    accounts = AccountService(identity, cache, categories, profiles)

    app = FastAPI(title="Finance Tracker API", version="1.0.0")
    app.state.config = config
    app.state.store = store
    app.state.identity = identity
    app.state.cache = cache
    app.state.services = Services(
        accounts=accounts,
        transactions=transactions,
        categories=categories,
        profiles=profiles,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.analytics import router as analytics_router
    from routes.auth import router as auth_router
    from routes.categories import router as categories_router
    from routes.health import router as health_router
    from routes.settings import router as settings_router
    from routes.transactions import router as transactions_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(transactions_router)
    app.include_router(analytics_router)
    app.include_router(categories_router)
    app.include_router(settings_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = config.validate()
        if missing:
            logger.warning("Missing env vars (Firebase backend may fail): %s", ", ".join(missing))
        logger.info("Using %s store and %s identity provider", store.name, identity.name)

    return app


app = create_app()
