from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from app.api.middleware.error_handler import (
    handle_expense_tracker_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from app.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from app.api.v1 import router as v1_router
from app.api.v1.health import router as health_router
from app.config import settings
from app.core.exceptions import ExpenseTrackerError
from app.db.session import async_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await async_engine.dispose()


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="Expense Tracker API",
        description="Personal income and expense tracking with balance and monthly summaries",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(ExpenseTrackerError, handle_expense_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
