"""FastAPI application factory and server entry point.

Run:
    best-agent-api

or, with auto-reload during development:
    uvicorn bestagent.api.app:create_app --factory --reload --port 3000
"""

import logging
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bestagent.api.routes import router
from bestagent.api.service import CustomerStatusService, build_service
from bestagent.config import Settings, load_settings
from bestagent.logging_context import configure_logging, set_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    settings: Settings | None = None,
    service: CustomerStatusService | None = None,
) -> FastAPI:
    """Build the API.

    Args:
        settings: Configuration (loaded from the environment when omitted)
        service: Prebuilt lookup service; when omitted, one is wired to
            Caspio at start-up and its HTTP client closed at shutdown

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        http_client: httpx.Client | None = None
        if app.state.service is None:
            http_client = httpx.Client(timeout=settings.http_timeout)
            app.state.service = build_service(settings, http_client)
        logger.info("%s %s started", settings.service_name, settings.version)
        try:
            yield
        finally:
            if http_client is not None:
                http_client.close()

    app = FastAPI(
        title="Best Agent API",
        description="Caller ID status lookup for voice agents, backed by Caspio.",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        set_request_id(request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(router)
    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
