from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smalltalk.api.router import api_router
from smalltalk.core.config import settings
from smalltalk.core.logging import configure_logging
from smalltalk.realtime import blob_sweeper, create_socket_app
from smalltalk.realtime.messages import now_ms
from smalltalk.schemas.health import HealthResponse, ServiceInfo
import smalltalk.realtime.events  # noqa: F401 - ensure handlers are registered

configure_logging(settings.debug)


@asynccontextmanager
async def lifespan(app: FastAPI):
    blob_sweeper.start()
    try:
        yield
    finally:
        await blob_sweeper.stop()


fastapi_app = FastAPI(title=settings.project_name, version=settings.version, debug=settings.debug, lifespan=lifespan)

fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

fastapi_app.include_router(api_router)


@fastapi_app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=now_ms())


@fastapi_app.get("/", tags=["health"], response_model=ServiceInfo)
async def service_info() -> ServiceInfo:
    return ServiceInfo(
        name=settings.project_name,
        version=settings.version,
        endpoints={
            "health": "GET /health",
            "uploadVoice": "POST /upload-voice",
            "getVoice": "GET /voice/:messageId",
        },
    )


app = create_socket_app(fastapi_app)

# Re-export FastAPI application for tests if needed
api_app = fastapi_app
