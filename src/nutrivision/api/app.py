"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nutrivision.api.routes import router as api_router
from nutrivision.app_logging import configure_logging
from nutrivision.containers import AppContainer
from nutrivision.errors import NutriVisionError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    debug = container.settings.environment == "local"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(NutriVisionError)
    async def handle_app_error(
        request: Request, exc: NutriVisionError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s: %s",
                exc.message,
                exc.details,
                extra={"path": request.url.path},
            )
        return _error_response(
            exc.status_code,
            exc.message,
            _debug_details(exc.details, exc) if debug else exc.details,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(400, "Invalid request", _describe_errors(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _error_response(
            500,
            "Internal server error",
            _debug_details(None, exc) if debug else None,
        )

    return app


def _error_response(
    status_code: int, message: str, details: str | None
) -> JSONResponse:
    content: dict[str, str] = {"error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _debug_details(details: str | None, exc: Exception) -> str:
    """Append the exception type so local runs show where errors came from."""
    debug = f"{type(exc).__name__}: {exc}".strip()
    return f"{details} (debug: {debug})" if details else debug


def _describe_errors(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
