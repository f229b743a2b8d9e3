# /gas_estimator/core/errors.py
# Domain error taxonomy. Each kind carries the HTTP status and the wire "type"
# the API layer reports; the message text is diagnostic payload only.


class GasEstimatorError(Exception):
    """Base class for every failure surfaced by the estimator."""

    error_type = "server_error"
    status_code = 500
    prefix = "Server error"
    # Whether the HTTP layer returns the bare detail instead of the prefixed text.
    expose_detail = False

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")

    @property
    def public_message(self) -> str:
        return self.detail if self.expose_detail else str(self)


class ConfigError(GasEstimatorError):
    """Startup/environment misconfiguration. Fatal."""

    error_type = "configuration_error"
    status_code = 500
    prefix = "Configuration error"


class ProviderError(GasEstimatorError):
    """Upstream node unreachable, malformed, or failing at transport level."""

    error_type = "provider_error"
    status_code = 503
    prefix = "Ethereum provider error"


class InvalidInputError(GasEstimatorError):
    """Malformed or missing address/numeric/hex field in the request."""

    error_type = "invalid_input"
    status_code = 400
    prefix = "Invalid input"
    expose_detail = True


class GasEstimationError(GasEstimatorError):
    """The node says the transaction would fail on-chain."""

    error_type = "gas_estimation_error"
    status_code = 400
    prefix = "Gas estimation failed"
    expose_detail = True


class ServerError(GasEstimatorError):
    """Unexpected internal failure."""
