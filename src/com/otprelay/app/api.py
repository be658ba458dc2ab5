"""FastAPI application exposing the OTP relay endpoints."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from com.otprelay import __version__
from com.otprelay.app.config import AppConfig, validate_config
from com.otprelay.app.schemas import (
    ErrorResponse,
    HealthResponse,
    OtpMessageOut,
    RetrieveOtpResponse,
    SubmitOtpRequest,
    SubmitOtpResponse,
)
from com.otprelay.cache.redis.otp_cache import RedisOtpCache, RedisOtpCacheConfig
from com.otprelay.cache.redis.redis_client import create_pool, redact_url, redis_session
from com.otprelay.common.errors import ConfigError, InputValidationError, MissingFieldError, StoreUnavailableError
from com.otprelay.services.otp_extract_service import OtpExtractService
from com.otprelay.services.otp_relay_service import OtpRelayService

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_otp_cache(request: Request) -> Iterator[RedisOtpCache]:
    state = request.app.state
    with redis_session(state.redis_pool) as client:
        yield RedisOtpCache(client, state.cache_cfg)


def get_relay_service(request: Request,
                      otp_cache: RedisOtpCache = Depends(get_otp_cache)) -> OtpRelayService:
    return OtpRelayService(request.app.state.otp_extractor, otp_cache)


def _checked_at() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(cfg: AppConfig) -> FastAPI:
    validate_config(cfg)
    store_url = redact_url(cfg.redis_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("started store=%s ttl=%ss prefix=%s", store_url, cfg.otp_ttl_seconds, cfg.otp_key_prefix)
        yield
        app.state.redis_pool.disconnect()
        logger.info("stopped")

    app = FastAPI(title="OTP Relay", version=__version__, lifespan=lifespan)
    try:
        app.state.redis_pool = create_pool(
            cfg.redis_url,
            socket_timeout_s=cfg.redis_socket_timeout_s,
            connect_timeout_s=cfg.redis_connect_timeout_s,
            retries=cfg.redis_retries,
        )
    except ValueError as e:
        raise ConfigError(f"Unusable REDIS_URL {store_url}: {e}") from None
    app.state.cache_cfg = RedisOtpCacheConfig(
        ttl_seconds=cfg.otp_ttl_seconds, key_prefix=cfg.otp_key_prefix, store_url=store_url)
    app.state.otp_extractor = OtpExtractService(cfg.otp_regex)

    @app.exception_handler(InputValidationError)
    async def _bad_input(request: Request, exc: InputValidationError) -> JSONResponse:
        logger.info("rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("rejected %s %s: unparseable request", request.method, request.url.path)
        return JSONResponse(status_code=400, content={"error": "Invalid JSON in request body"})

    @app.exception_handler(StoreUnavailableError)
    async def _store_down(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error("store unavailable %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"error": str(exc)})

    # the server still logs the traceback once, after this response is sent
    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/")
    def root() -> dict:
        return {
            "name": "OTP Relay API",
            "version": __version__,
            "endpoints": {
                "store": "POST /otp",
                "retrieve": "GET /otp?phone=...",
                "health": "GET /health",
            },
        }

    @app.get("/health", response_model=HealthResponse, responses={503: {"model": ErrorResponse}})
    def health(otp_cache: RedisOtpCache = Depends(get_otp_cache)) -> HealthResponse:
        otp_cache.ping()
        return HealthResponse(status="ok")

    @app.post("/otp", response_model=SubmitOtpResponse, responses=ERROR_RESPONSES)
    def submit_otp(payload: SubmitOtpRequest,
                   service: OtpRelayService = Depends(get_relay_service)) -> SubmitOtpResponse:
        if not payload.phone or not payload.message:
            raise MissingFieldError("Missing required fields: phone and message")
        service.submit(payload.phone, payload.message)
        return SubmitOtpResponse()

    @app.get("/otp", response_model=RetrieveOtpResponse, responses=ERROR_RESPONSES)
    def retrieve_otp(phone: Optional[str] = None,
                     service: OtpRelayService = Depends(get_relay_service)) -> RetrieveOtpResponse:
        checked_at = _checked_at()
        if not phone:
            raise MissingFieldError("Missing required parameter: phone")
        otp = service.retrieve(phone)
        messages = [OtpMessageOut(otp=otp)] if otp else []
        return RetrieveOtpResponse(ok=True, count=len(messages), messages=messages, checkedAt=checked_at)

    return app
