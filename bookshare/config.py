"""Application settings loaded from environment variables."""

from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class ReviewStoreBackend(str, Enum):
    SQL = "sql"
    MEMORY = "memory"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOOKSHARE_",
        env_file=".env",
        extra="ignore",
    )

    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"

    # ── Catalog (BN bibliographic API) ─────────────
    catalog_base_url: str = "https://data.bn.org.pl/api"
    catalog_timeout: float = 30.0

    # ── Review store ───────────────────────────────
    review_store_backend: ReviewStoreBackend = ReviewStoreBackend.SQL
    database_url: str = "sqlite+aiosqlite:///./bookshare.db"

    # ── Session cookie ─────────────────────────────
    session_cookie_name: str = "bookshare-session-token"
    session_max_age_seconds: int = 60 * 60 * 24 * 5
    protected_route_prefixes: list[str] = ["/home", "/library", "/settings"]
    auth_routes: list[str] = ["/login", "/"]
    login_path: str = "/login"
    home_path: str = "/home"

    # ── Recommendations ────────────────────────────
    top_rating_threshold: int = 7
    top_categories_limit: int = 3
    similar_books_limit: int = 10
    filtered_books_limit: int = 12

    @property
    def secure_cookies(self) -> bool:
        return self.environment == Environment.PRODUCTION


settings = Settings()
