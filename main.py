"""
Query Gateway application.

Run with `python main.py` or `uvicorn main:create_app --factory --port 3000`.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from db.database import build_database, dialect_for_url
from models.query import LifecycleState
from routes.query_gateway import router
from services.gateway_config import GatewayConfig, get_gateway_config
from services.query_service import QueryService

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


def create_app(config: Optional[GatewayConfig] = None) -> FastAPI:
    config = config or get_gateway_config()
    dialect = dialect_for_url(config.database_url)
    database = build_database(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await database.connect()
            logger.info(f"[gateway] connected {dialect.name} pool")
        except Exception as e:
            # Requests retry the connect and report the driver error themselves.
            logger.warning(f"[gateway] {dialect.name} pool not connected at startup: {e}")
        app.state.lifecycle = LifecycleState.READY
        logger.info(f"Server running at http://{config.host}:{config.port}")
        try:
            yield
        finally:
            await database.disconnect()
            logger.info("[gateway] pool disconnected")

    app = FastAPI(title="query-gateway", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.lifecycle = LifecycleState.STARTING
    app.state.query_service = QueryService(
        database,
        dialect,
        support_big_numbers=config.support_big_numbers,
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = get_gateway_config()
    uvicorn.run(create_app(config), host=config.host, port=config.port)
