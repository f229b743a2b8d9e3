# /gas_estimator/core/api.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.middleware.cors import CORSMiddleware

from gas_estimator.core.error_translator import translate_rpc_error
from gas_estimator.core.errors import GasEstimatorError, InvalidInputError, ServerError
from gas_estimator.core.gas_cache import BlockNumberCache
from gas_estimator.core.gas_estimator import GasEstimationEngine
from gas_estimator.core.logger import get_logger
from gas_estimator.core.models import TransactionInput
from gas_estimator.core.version import __version__

log = get_logger(__name__)


def error_response(error: GasEstimatorError) -> JSONResponse:
    return JSONResponse(
        {"error": {"message": error.public_message, "type": error.error_type}},
        status_code=error.status_code,
    )


def create_app(engine: GasEstimationEngine, block_cache: BlockNumberCache) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("HTTP_SERVICE_STARTED")
        yield
        log.warning("HTTP_SERVICE_SHUTDOWN")

    app = FastAPI(title="Ethereum Gas Estimator", version=__version__, lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(GasEstimatorError)
    async def domain_error(request: Request, exc: GasEstimatorError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def schema_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}" for err in exc.errors()
        )
        return error_response(InvalidInputError(f"Malformed request: {problems}"))

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        log.error("UNHANDLED_SERVER_ERROR", path=request.url.path, error=str(exc), exc_info=exc)
        return error_response(ServerError("Internal server error"))

    @app.post("/api/v1/estimate-gas")
    async def estimate_gas(tx: TransactionInput):
        if not tx.from_:
            raise InvalidInputError("Missing 'from' address")
        if not tx.to:
            raise InvalidInputError("Missing 'to' address")

        log.debug("ESTIMATE_GAS_REQUEST", tx=tx.model_dump(by_alias=True, exclude_none=True))
        estimation = await engine.estimate(tx)
        return estimation.to_wire()

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    @app.get("/ready")
    async def ready():
        try:
            block_number = await block_cache.get_latest_block_number()
        except Exception as e:
            raise translate_rpc_error(e) from e
        return {"status": "ready", "blockNumber": block_number}

    return app
