# /gas_estimator/core/config.py
import sys
from ipaddress import IPv4Address
from typing import List

from pydantic import Field, IPvAnyAddress, SecretStr, ValidationError
from pydantic_settings import BaseSettings
import structlog

from gas_estimator.core.errors import ConfigError


class Settings(BaseSettings):
    # Upstream node. Only the first entry is used; failover is not supported.
    ETHEREUM_RPC_URLS: str | None = None
    RPC_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    STARTUP_CONNECT_ATTEMPTS: int = Field(default=3, ge=1)

    # Gas price cache; 0 disables caching entirely
    CACHE_DURATION_SECONDS: int = Field(default=0, ge=0)

    # HTTP server
    HOST: IPvAnyAddress = IPv4Address("0.0.0.0")
    PORT: int = Field(default=8080, ge=1, le=65535)

    # Operational Settings
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: SecretStr | None = None

    @property
    def rpc_urls(self) -> List[str]:
        if not self.ETHEREUM_RPC_URLS:
            return []
        return [u.strip() for u in self.ETHEREUM_RPC_URLS.split(",") if u.strip()]

    @property
    def ethereum_rpc_url(self) -> str | None:
        """The configured node endpoint, or ``None`` if nothing is set."""
        urls = self.rpc_urls
        return urls[0] if urls else None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def load_settings(**overrides) -> Settings:
    """Builds settings from the environment, turning validation failures into ConfigError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ConfigError(f"Invalid {fields or 'configuration'}") from e


try:
    settings = load_settings()
except ConfigError as e:
    # logger.py reads these settings, so the failure goes through bare structlog.
    structlog.get_logger("GasEstimator.Config").critical("FAILED_TO_LOAD_SETTINGS", error=str(e))
    sys.exit(1)
