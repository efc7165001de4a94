"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # Plugin-compatible version (major.minor.patch)
    VERSION: str = "3.2.6"

    # Host site (edit links are built against this)
    SITE_URL: str = "http://localhost:8080"
    EDIT_PAGE_PATH: str = "/form-test-edit/"

    # Edit token signing (process-wide salt, never rotated)
    EDIT_TOKEN_SECRET: str = "change-this-in-production"
    EDIT_TOKEN_META_KEY: str = "edit_token"

    # WordPress / Gravity Forms REST API
    WP_REST_URL: str = ""  # Falls back to {SITE_URL}/wp-json if empty
    GF_CONSUMER_KEY: str = ""
    GF_CONSUMER_SECRET: str = ""
    GF_TIMEOUT_SECONDS: float = 15.0

    # Outbound webhook
    WEBHOOK_URL: str = ""
    WEBHOOK_SECRET: str = ""  # Sent as X-Webhook-Token when set
    WEBHOOK_TIMEOUT_SECONDS: float = 30.0
    WEBHOOK_MAX_ATTEMPTS: int = 3
    WEBHOOK_PAYLOAD_FORMAT: str = "structured"  # "structured" | "legacy"

    # Nested form resolution
    NESTED_MAX_DEPTH: int = 5
    NESTED_FETCH_CONCURRENCY: int = 1

    # Shared secret for /events/* endpoints called by the host site
    INTERNAL_SECRET: str = ""

    # Include field label map in edit responses
    EDIT_DEBUG: bool = False

    @property
    def edit_page_url(self) -> str:
        """Absolute URL of the page that hosts the entry editor."""
        base = self.SITE_URL.strip().rstrip("/")
        path = "/" + self.EDIT_PAGE_PATH.strip().lstrip("/")
        return f"{base}{path}"

    @property
    def rest_base_url(self) -> str:
        """Base URL for the WordPress REST API (gf/v2 and wp/v2 live under it)."""
        if self.WP_REST_URL.strip():
            return self.WP_REST_URL.strip().rstrip("/")
        return f"{self.SITE_URL.strip().rstrip('/')}/wp-json"

    @property
    def gf_configured(self) -> bool:
        return bool(self.GF_CONSUMER_KEY and self.GF_CONSUMER_SECRET)

    @property
    def legacy_payload(self) -> bool:
        return self.WEBHOOK_PAYLOAD_FORMAT.strip().lower() == "legacy"


settings = Settings()
