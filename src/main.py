from contextlib import asynccontextmanager
import logging
import os
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from starlette.responses import Response

from api_v1 import router as router_v1
from api_v1.errors import register_exception_handlers
from identity.config import settings
from identity.logging_config import configure_logging, trace_id_ctx

logger = logging.getLogger(__name__)

TRACE_ID_HEADER = "X-Trace-Id"


class LoggingCORSMiddleware(CORSMiddleware):
    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        method = request.method
        response: Response = await super().dispatch(request, call_next)

        if origin:
            allowed_origin = response.headers.get("access-control-allow-origin")
            if allowed_origin:
                logger.debug(
                    "CORS request allowed | origin=%s | method=%s | allow_credentials=%s",
                    origin,
                    method,
                    settings.cors_allow_credentials,
                )
            else:
                logger.warning(
                    "CORS request denied or not matched | origin=%s | method=%s",
                    origin,
                    method,
                )

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Application starting up...")
    logger.info(
        "CORS configuration | origins=%s | allow_credentials=%s",
        settings.cors_allowed_origins,
        settings.cors_allow_credentials,
    )
    logger.info(
        "Token configuration | refresh_strategy=%s | access_ttl_minutes=%s | refresh_ttl_days=%s",
        settings.refresh_tokens.strategy,
        settings.jwt.access_token_expiration_minutes,
        settings.jwt.refresh_token_expiration_days,
    )

    yield

    logger.info("Application shutting down...")
    from identity.models import db_helper

    await db_helper.dispose()
    logger.info("Database engine disposed")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    LoggingCORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router=router_v1, prefix=settings.api_v1_prefix)
register_exception_handlers(app)


@app.middleware("http")
async def assign_trace_id(request: Request, call_next):
    # Assign/propagate a trace id for each request
    trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
    token = trace_id_ctx.set(trace_id)
    try:
        response = await call_next(request)
    finally:
        trace_id_ctx.reset(token)
    # Include trace id in response for clients to propagate
    response.headers[TRACE_ID_HEADER] = trace_id
    return response


if __name__ == "__main__":

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")  # Allow external connections
    uvicorn.run("main:app", host=host, port=port, reload=True)
