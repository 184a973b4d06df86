from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from marketplace_chat.api.middleware.timing import RequestTimingMiddleware
from marketplace_chat.api.v1.routers import health, messages, ws
from marketplace_chat.application.exceptions import (
    ConflictError,
    NoOpError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from marketplace_chat.config import settings
from marketplace_chat.infrastructure.bus.redis_pubsub import (
    RedisPubSubEmitter,
    RedisPubSubSubscriber,
)
from marketplace_chat.infrastructure.bus.redis_streams import RedisStreamPublisher
from marketplace_chat.services.notifier import ChatNotifier

logger = logging.getLogger(__name__)


async def _on_pubsub_event(event_type: str, data: Any) -> None:
    """Forward a chat event from Redis to the WS connections of this worker."""
    await ws.get_manager().broadcast(event_type, data)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    app.state.notifier = ChatNotifier(
        RedisPubSubEmitter(app.state.redis, settings.REDIS_PUBSUB_CHANNEL),
        RedisStreamPublisher(app.state.redis, maxlen=settings.NOTIFICATION_STREAM_MAXLEN),
        exchange=settings.NOTIFICATION_EXCHANGE,
        routing_key=settings.NOTIFICATION_ROUTING_KEY,
        timeout=settings.NOTIFY_TIMEOUT_SECONDS,
    )

    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_PUBSUB_CHANNEL,
        _on_pubsub_event,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await subscriber.stop()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware, slow_request_ms=settings.SLOW_REQUEST_MS)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(NoOpError)
    async def _noop(_req: Request, exc: NoOpError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(PersistenceError)
    async def _persistence(_req: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Persistence failure: %s", exc.detail)
        headers = {"Retry-After": "1"} if exc.transient else None
        return JSONResponse(
            status_code=503,
            content={"detail": exc.detail},
            headers=headers,
        )
