"""Translate identity errors into HTTP problem bodies."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from identity.constants import auth_messages
from identity.exceptions import AuthErrorKind, AuthenticationError, IdentityError, ValidationException

logger = logging.getLogger(__name__)

# Per-kind status overrides; everything else uses AuthenticationError.status_code
AUTH_ERROR_STATUS: Dict[AuthErrorKind, int] = {}

_VALUE_ERROR_PREFIX = "Value error, "


def _problem(status: int, title: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status, content={"title": title, "status": status, **extra})


def _field_name(loc: tuple) -> str:
    if not loc:
        return "body"
    return str(loc[-1])


def _messages_for(error: Dict[str, Any]) -> List[str]:
    ctx = error.get("ctx") or {}
    nested = ctx.get("errors")
    if isinstance(nested, (list, tuple)) and nested:
        return [str(message) for message in nested]
    message = str(error.get("msg", ""))
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return [message]


def collect_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Group pydantic error entries by field name."""
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        field = _field_name(tuple(error.get("loc") or ()))
        grouped.setdefault(field, []).extend(_messages_for(error))
    return grouped


async def identity_error_handler(_: Request, exc: IdentityError) -> JSONResponse:
    if isinstance(exc, ValidationException):
        return _problem(exc.status_code, exc.title, errors=exc.errors)

    status = exc.status_code
    if isinstance(exc, AuthenticationError):
        status = AUTH_ERROR_STATUS.get(exc.kind, status)
    return _problem(status, exc.title, detail=exc.message)


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = collect_validation_errors(list(exc.errors()))
    return _problem(ValidationException.status_code, ValidationException.title, errors=errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error | method=%s | path=%s", request.method, request.url.path)
    return _problem(500, "Server Error", detail=auth_messages.UNEXPECTED_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IdentityError, identity_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
