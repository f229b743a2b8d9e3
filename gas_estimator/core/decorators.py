# /gas_estimator/core/decorators.py
# Retry policy for startup-time network checks. Request handling never retries.
import logging

from tenacity import before_sleep_log, retry, stop_after_attempt, wait_exponential

from gas_estimator.core.logger import get_logger

log = get_logger(__name__)


def retriable_startup_call(attempts: int = 3):
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,  # Re-raise the last exception after retries are exhausted
    )
