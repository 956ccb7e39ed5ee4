from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from spacetime.api.v1.api import api_router
from spacetime.api.v1.endpoints import system
from spacetime.core.config import settings
from spacetime.core.errors import Err, ErrorKind
from spacetime.database import create_schema, engine
from spacetime.services.memory.memory_handler import INVALID_BODY_MESSAGE


# ---- Access-Log-Filter: /health stummschalten ----
class _HealthSilencer(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except Exception:
            return True
        return "/health" not in msg

logging.getLogger("uvicorn.access").addFilter(_HealthSilencer())
# ---------------------------------------------------

log = logging.getLogger("uvicorn.error")

# Detail, mit dem FastAPI nicht dekodierbare Bodies ablehnt
BODY_PARSE_ERROR = "There was an error parsing the body"


async def _on_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    # z. B. kaputtes JSON: gleiche Form wie Handler-Validierungsfehler
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())) or "body", "message": err.get("msg", "invalid value")}
        for err in exc.errors()
    ]
    err = Err(ErrorKind.VALIDATION, INVALID_BODY_MESSAGE, details)
    return JSONResponse(err.to_payload(), status_code=err.status_code)


async def _on_http_exception(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 400 and exc.detail == BODY_PARSE_ERROR:
        # z. B. kein gültiges UTF-8 im JSON-Body
        err = Err(ErrorKind.VALIDATION, INVALID_BODY_MESSAGE)
        return JSONResponse(err.to_payload(), status_code=err.status_code)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if settings.auto_create_schema:
            try:
                await create_schema(engine)
                log.info("Database schema ensured.")
            except Exception as e:
                log.error("Schema creation failed: %s", e)
                raise
        if settings.auth_enabled:
            log.info("Auth enabled (issuer=%s).", settings.keycloak_issuer)
        else:
            log.info("Auth disabled; memories are owned by user %s.", settings.default_user_id)
        yield
        await engine.dispose()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _on_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_exception)

    # Health für LB/Compose
    app.include_router(system.router)

    # REST
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
