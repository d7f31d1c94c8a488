"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        self.cache_ttl_seconds: float = float(os.getenv("CACHE_TTL_SECONDS", "30"))
        self.default_currency: str = os.getenv("DEFAULT_CURRENCY", "RWF")
        self.http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

        # Firebase (Firestore + Identity Toolkit REST). Unset project -> in-memory backends.
        self.firebase_project_id: str | None = os.getenv("FIREBASE_PROJECT_ID")
        self.firebase_api_key: str | None = os.getenv("FIREBASE_API_KEY")
        self.firestore_access_token: str | None = os.getenv("FIRESTORE_ACCESS_TOKEN")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def backend(self) -> str:
        return "firebase" if self.firebase_project_id else "memory"

    def validate(self) -> list[str]:
        """Return list of missing env vars required by the selected backend."""
        if self.backend != "firebase":
            return []
        required = ["FIREBASE_API_KEY"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "FIREBASE_API_KEY": "firebase_api_key",
        "FIREBASE_PROJECT_ID": "firebase_project_id",
    }
    return mapping.get(env_var, env_var.lower())
