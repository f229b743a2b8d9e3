# /gas_estimator/core/logger.py
import logging

import sentry_sdk
import structlog
from prometheus_client import Counter

from gas_estimator.core.config import settings

# --- Prometheus Metrics ---
GAS_ESTIMATES = Counter(
    "gas_estimator_estimates_total",
    "Gas estimation requests by transaction class and outcome",
    ["transaction_class", "outcome"],
)
GAS_PRICE_CACHE_EVENTS = Counter(
    "gas_estimator_price_cache_events_total",
    "Gas price cache lookups by result",
    ["event"],
)
GAS_ESTIMATION_BRANCH_FAILURES = Counter(
    "gas_estimator_branch_failures_total",
    "Failed price or limit branches of an estimate, including ones not raised",
    ["branch", "error_type"],
)
UPSTREAM_RPC_CALLS = Counter(
    "gas_estimator_upstream_rpc_calls_total",
    "Calls issued to the upstream Ethereum node",
    ["method"],
)


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(log_level: str | None = None):
    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN.get_secret_value(), traces_sample_rate=1.0)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(log_level or settings.LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


configure_logging()
log = get_logger("GasEstimator.System")
