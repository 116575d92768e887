"""ASGI application for the DevConnect booking marketplace."""

import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis  # type: ignore[import-untyped]
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from secure import Secure

from app.api.v1 import router as v1_router
from app.core.config import get_settings
from app.core.errors import BadRequestError, ReservationError
from app.db.session import dispose_engine
from app.security.logging_filters import install_sensitive_filter

logger = logging.getLogger(__name__)

settings = get_settings()
install_sensitive_filter()


async def _start_limiter() -> redis.Redis | None:
    if not settings.redis_url:
        logger.info("REDIS_URL not set; request throttling is off")
        return None
    client = redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        await FastAPILimiter.init(client)
    except Exception:  # pragma: no cover - throttling is optional at boot
        logger.exception("Rate limiter could not reach Redis; throttling is off")
    return client


async def _stop_limiter(client: redis.Redis | None) -> None:
    if FastAPILimiter.redis is not None:
        await FastAPILimiter.close()
    if client is not None:
        await client.aclose()


@asynccontextmanager
async def lifespan(_: FastAPI):
    limiter_client = await _start_limiter()
    try:
        yield
    finally:
        try:
            await _stop_limiter(limiter_client)
        except Exception:  # pragma: no cover - shutdown must reach the engine
            logger.exception("Rate limiter shutdown failed")
        await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin for origin in settings.cors_allow_origins if origin]
    or ["http://localhost:8081"],
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

_secure = Secure()


@app.middleware("http")
async def _security_headers(request: Request, call_next):
    response = await call_next(request)
    _secure.set_headers(response)
    return response


@app.exception_handler(ReservationError)
async def _reservation_failure(request: Request, exc: ReservationError) -> JSONResponse:
    """Render booking failures as ``{"success": false, "error": ...}``."""
    where = f"{request.method} {request.url.path}"
    if exc.status_code >= 500:
        logger.error("%s on %s", exc.code, where)
    else:
        logger.info("%s on %s: %s", exc.code, where, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


_BOOKINGS_PATH = f"{settings.api_v1_prefix}/bookings"


@app.exception_handler(RequestValidationError)
async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Booking routes answer bad payloads with the booking failure body.

    The raw input is never echoed back; every other route keeps FastAPI's 422.
    """
    path = request.url.path
    if path != _BOOKINGS_PATH and not path.startswith(f"{_BOOKINGS_PATH}/"):
        return await request_validation_exception_handler(request, exc)
    fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
    logger.info("Rejected malformed payload on %s %s: %s", request.method, path, fields)
    failure = BadRequestError()
    return JSONResponse(status_code=failure.status_code, content=failure.to_payload())


app.include_router(v1_router, prefix=settings.api_v1_prefix)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    return {"message": settings.app_name}
