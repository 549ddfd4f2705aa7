"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mess_tracker.api.auth import router as auth_router
from mess_tracker.api.extra_items import router as extra_items_router
from mess_tracker.api.meal_entries import router as meal_entries_router
from mess_tracker.api.meal_plans import router as meal_plans_router
from mess_tracker.api.subscriptions import router as subscriptions_router
from mess_tracker.api.users import router as users_router
from mess_tracker.app_logging import configure_logging
from mess_tracker.config import parse_allowed_origins
from mess_tracker.containers import AppContainer
from mess_tracker.domain.errors import MessTrackerError

_STATUS_CATEGORIES = {
    400: "Validation Error",
    401: "Access Denied",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Mess Tracker")
    app.state.container = container

    origins = parse_allowed_origins(container.settings.cors_allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MessTrackerError)
    async def handle_domain_error(
        request: Request, exc: MessTrackerError
    ) -> JSONResponse:
        body: dict[str, object] = {"error": exc.category, "message": exc.message}
        if exc.details is not None:
            body["details"] = jsonable_encoder(exc.details)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Validation Error",
                "message": "Invalid request data",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": _STATUS_CATEGORIES.get(exc.status_code, "Error"),
                "message": str(exc.detail),
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Server Error", "message": "Something went wrong"},
        )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(meal_entries_router)
    app.include_router(meal_plans_router)
    app.include_router(extra_items_router)
    app.include_router(subscriptions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok", "environment": container.settings.environment}

    return app
