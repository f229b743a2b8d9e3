# /main.py
# Starts the gas estimation service: validate config, check the node, serve HTTP.
import asyncio
import sys

import uvicorn

from gas_estimator.core.api import create_app
from gas_estimator.core.config import settings
from gas_estimator.core.config_validator import validate as validate_config
from gas_estimator.core.errors import GasEstimatorError
from gas_estimator.core.ethereum_rpc import EthereumRpc
from gas_estimator.core.gas_cache import BlockNumberCache, GasPriceCache
from gas_estimator.core.gas_estimator import GasEstimationEngine
from gas_estimator.core.logger import configure_logging, get_logger
from gas_estimator.core.version import __version__

# Readiness check block height is refreshed at most this often
BLOCK_NUMBER_TTL_SECONDS = 5


async def main():
    configure_logging()
    log = get_logger("GasEstimator.System")
    validate_config(settings)
    log.info("GAS_ESTIMATOR_STARTING", version=__version__)

    rpc = EthereumRpc(settings.ethereum_rpc_url, timeout=settings.RPC_TIMEOUT_SECONDS)
    try:
        await rpc.verify_connection(attempts=settings.STARTUP_CONNECT_ATTEMPTS)

        cache = GasPriceCache(rpc)
        engine = GasEstimationEngine(rpc, cache, cache_ttl=settings.CACHE_DURATION_SECONDS)
        app = create_app(engine, BlockNumberCache(rpc, ttl=BLOCK_NUMBER_TTL_SECONDS))

        # uvicorn installs the SIGINT/SIGTERM handlers and drains in-flight requests.
        server = uvicorn.Server(uvicorn.Config(
            app,
            host=str(settings.HOST),
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower(),
        ))
        log.info("HTTP_SERVER_LISTENING", host=str(settings.HOST), port=settings.PORT)
        await server.serve()
    finally:
        await rpc.close()
        log.warning("SYSTEM_SHUTDOWN_COMPLETE")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except GasEstimatorError as e:
        get_logger("GasEstimator.System").critical("STARTUP_FAILED", error_type=e.error_type, error=str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        pass
