"""
Error types and their HTTP translation.

Services raise the domain errors below; the handlers registered by
``register_exception_handlers`` turn them into ``{"error": ...}`` JSON
bodies.  Server-side failures echo the underlying driver message back to
the caller, so clients see the same text that lands in the log.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PressroomError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(PressroomError):
    """A required field is missing, empty or malformed."""

    status_code = 400

    def __init__(self, message: str, missing_fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing_fields = missing_fields or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.missing_fields:
            data["missing_fields"] = self.missing_fields
        return data


class NotFoundError(PressroomError):
    status_code = 404


class StoreError(PressroomError):
    """Any failure talking to the durable store."""

    @classmethod
    def wrap(cls, exc: Exception) -> "StoreError":
        # Prefer the DBAPI driver's message over SQLAlchemy's SQL-laden one.
        return cls(str(getattr(exc, "orig", None) or exc))


class CacheError(PressroomError):
    """Any failure talking to the ranking cache."""


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def _handle_pressroom_error(request: Request, exc: PressroomError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    missing: list[str] = []
    problems: list[str] = []
    for err in exc.errors():
        loc = tuple(err.get("loc") or ())
        if loc == ("body",):
            # The payload itself is absent or not an object; no single field is at fault.
            error = ValidationError("Request body must be a JSON object")
            return JSONResponse(status_code=error.status_code, content=error.to_dict())
        # loc is ("body", "userId") / ("path", "article_id"); keep the field name.
        field = str(loc[-1]) if loc else "request"
        if err.get("type") == "missing":
            missing.append(field)
        else:
            problems.append(f"{field}: {err.get('msg')}")

    if missing:
        error = ValidationError(f"{', '.join(missing)} required", missing_fields=missing)
    else:
        error = ValidationError("; ".join(problems) or "Malformed request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PressroomError, _handle_pressroom_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
