# /gas_estimator/core/config_validator.py
# Run at startup to validate configuration before anything touches the network.
from urllib.parse import urlparse

from gas_estimator.core.config import Settings, settings as default_settings
from gas_estimator.core.errors import ConfigError
from gas_estimator.core.logger import get_logger

log = get_logger(__name__)


def validate(settings: Settings = default_settings) -> Settings:
    log.info("CONFIG_VALIDATION_START")
    url = settings.ethereum_rpc_url
    if not url:
        log.critical("CONFIG_MISSING", key="ETHEREUM_RPC_URLS")
        raise ConfigError("No Ethereum RPC URLs provided")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        log.critical("CONFIG_INVALID", key="ETHEREUM_RPC_URLS")
        raise ConfigError("Invalid ETHEREUM_RPC_URLS: expected an http(s) URL")

    if len(settings.rpc_urls) > 1:
        log.warning("CONFIG_EXTRA_RPC_URLS_IGNORED", count=len(settings.rpc_urls) - 1)

    log.info("CONFIG_VALIDATION_PASSED", cache_duration_seconds=settings.CACHE_DURATION_SECONDS)
    return settings
