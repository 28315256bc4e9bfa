"""Application settings loaded from environment variables and ``.env``."""

import logging
import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from bestagent.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Configuration for the Best Agent API."""

    caspio_account_id: str = Field(default="", description="Caspio account subdomain")
    caspio_client_id: str = Field(default="", description="OAuth client ID")
    caspio_client_secret: str = Field(default="", description="OAuth client secret")
    caspio_base_url: str = Field(
        default="",
        description="Override for https://<account>.caspio.com",
    )
    customer_table: str = Field(default="RIMS_DATA", description="Customer records table")
    package_table: str = Field(default="destsel", description="Package definitions table")
    page_size: int = Field(default=100, description="q.pageSize for record queries")
    token_expiry_margin: int = Field(
        default=60, description="Seconds subtracted from the token TTL"
    )
    http_timeout: float = Field(default=30.0, description="Timeout for Caspio calls in seconds")
    business_timezone: str = Field(
        default="America/Los_Angeles", description="Timezone for business hours"
    )
    business_open_hour: int = Field(default=9, description="Opening hour (24h)")
    business_close_hour: int = Field(default=17, description="Closing hour (24h)")
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Listen port")
    log_level: str = Field(default="INFO", description="Root log level")
    service_name: str = Field(default="best-agent-api", description="Name reported by /health")
    version: str = Field(default="1.0.0", description="Version reported by /health")

    @property
    def base_url(self) -> str:
        """Root URL of the Caspio account."""
        if self.caspio_base_url:
            return self.caspio_base_url.rstrip("/")
        return f"https://{self.caspio_account_id}.caspio.com"

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/oauth/token"

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.caspio_account_id or self.caspio_base_url
        ) and bool(self.caspio_client_id and self.caspio_client_secret)


def _env_int(env_var: str, default: int) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid integer for {env_var}: {raw!r}") from None


def _env_float(env_var: str, default: float) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid float for {env_var}: {raw!r}") from None


def validate_settings(settings: Settings) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not 1 <= settings.page_size <= 1000:
        raise ConfigurationError(
            f"CASPIO_PAGE_SIZE must be between 1 and 1000, got {settings.page_size}"
        )
    if settings.token_expiry_margin < 0:
        raise ConfigurationError(
            f"TOKEN_EXPIRY_MARGIN must be >= 0, got {settings.token_expiry_margin}"
        )
    if settings.http_timeout <= 0:
        raise ConfigurationError(f"HTTP_TIMEOUT must be > 0, got {settings.http_timeout}")
    if not 0 <= settings.business_open_hour < settings.business_close_hour <= 24:
        raise ConfigurationError(
            "Business hours must satisfy 0 <= open < close <= 24, "
            f"got {settings.business_open_hour}-{settings.business_close_hour}"
        )
    if not 0 < settings.port < 65536:
        raise ConfigurationError(f"PORT must be a valid TCP port, got {settings.port}")


def load_settings() -> Settings:
    """Load and validate settings from the environment (and ``.env`` if present)."""
    load_dotenv(find_dotenv(usecwd=True))

    settings = Settings(
        caspio_account_id=os.getenv("CASPIO_ACCOUNT_ID", ""),
        caspio_client_id=os.getenv("CASPIO_CLIENT_ID", ""),
        caspio_client_secret=os.getenv("CASPIO_CLIENT_SECRET", ""),
        caspio_base_url=os.getenv("CASPIO_BASE_URL", ""),
        customer_table=os.getenv("CASPIO_CUSTOMER_TABLE", "RIMS_DATA"),
        package_table=os.getenv("CASPIO_PACKAGE_TABLE", "destsel"),
        page_size=_env_int("CASPIO_PAGE_SIZE", 100),
        token_expiry_margin=_env_int("TOKEN_EXPIRY_MARGIN", 60),
        http_timeout=_env_float("HTTP_TIMEOUT", 30.0),
        business_timezone=os.getenv("BUSINESS_TIMEZONE", "America/Los_Angeles"),
        business_open_hour=_env_int("BUSINESS_OPEN_HOUR", 9),
        business_close_hour=_env_int("BUSINESS_CLOSE_HOUR", 17),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    validate_settings(settings)

    if not settings.has_credentials:
        logger.warning("Caspio credentials are not configured; lookups will fail")
    return settings
