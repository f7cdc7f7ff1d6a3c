from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.oauth import router as oauth_router
from app.core.config import SETTINGS
from app.core.errors import OAuth2AuthenticationError
from app.core.logging import setup_logging
from app.middleware.request_context import RequestContextMiddleware

setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="pkce-service",
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(RequestContextMiddleware)


@app.exception_handler(OAuth2AuthenticationError)
async def oauth2_error_handler(
    _request: Request, exc: OAuth2AuthenticationError
) -> JSONResponse:
    # RFC 6749 §5.2 body; token responses must never be cached (§5.1).
    return JSONResponse(
        status_code=exc.error.status_code,
        content=exc.error.to_dict(),
        headers={"Cache-Control": "no-store", "Pragma": "no-cache"},
    )


app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(oauth_router)

logger.info(
    "pkce-service started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
