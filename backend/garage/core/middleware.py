"""
CORS middleware and exception handlers for the FastAPI application.

Every failure leaves the gateway with the same body shape:
``{"error": str, "errors": [...]?}``.
"""
import logging
from typing import List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from garage.core.exceptions import GarageProxyException

logger = logging.getLogger(__name__)


def apply_cors(app: FastAPI, allow_origins: List[str]) -> None:
    """Apply CORS middleware. Permissive unless origins are configured."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins or ["*"],
        allow_credentials="*" not in (allow_origins or ["*"]),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )


async def _garage_exception_handler(request: Request, exc: GarageProxyException) -> JSONResponse:
    logger.info(
        "request failed method=%s path=%s status=%s error=%s",
        request.method, request.url.path, exc.status_code, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", []) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=400, content={"error": message, "errors": errors})


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def apply_exception_handlers(app: FastAPI) -> None:
    """Render every error as the uniform error body."""
    app.add_exception_handler(GarageProxyException, _garage_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
