"""
Exception handlers for the leaderboard API.

Every failure leaves the API as ``{"success": false, "message": ...}``.
"""
import logging
from fastapi import Request, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import (
    LeaderboardException, UserNotFound, GameNotFound, ScoreNotFound,
    FriendRequestNotFound, InvalidResetToken, ScoreNotHigher, NotScoreOwner,
    SelfFriendRequest, AlreadyFriends, FriendRequestPending, LastAdminRemoval,
    DuplicateAccount, PermissionDenied, InvalidCredentials, NotAuthenticated,
    OperationFailed
)

logger = logging.getLogger(__name__)


def create_error_response(status_code: int, message: str, **extra) -> JSONResponse:
    """Create a standardized error response."""
    content = {"success": False, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def not_found_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    """Handle missing users, games, scores, requests and reset tokens."""
    return create_error_response(404, str(exc))


async def business_rule_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    """Handle rejected operations (score not higher, duplicate request, ...)."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return create_error_response(400, str(exc))


async def duplicate_account_handler(request: Request, exc: DuplicateAccount) -> JSONResponse:
    return create_error_response(409, str(exc))


async def permission_denied_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    logger.warning(f"Forbidden {request.method} {request.url.path}: {exc}")
    return create_error_response(403, str(exc))


async def authentication_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    return create_error_response(401, str(exc))


async def operation_failed_handler(request: Request, exc: OperationFailed) -> JSONResponse:
    """Store failures were logged where they happened; only the generic message goes out."""
    return create_error_response(500, str(exc))


async def leaderboard_exception_handler(request: Request, exc: LeaderboardException) -> JSONResponse:
    """Handle generic leaderboard exceptions."""
    return create_error_response(400, str(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle validation errors with better formatting."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(x) for x in error["loc"][1:]),
            "message": error["msg"],
            "type": error["type"]
        })

    message = errors[0]["message"] if errors else "Validation error"
    return create_error_response(422, message, errors=errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle generic HTTP exceptions."""
    return create_error_response(exc.status_code, str(exc.detail))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    # Don't expose internal errors in production
    if settings.DEBUG:
        message = str(exc)
    else:
        message = "An unexpected error occurred"

    return create_error_response(500, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    for exc_class in (UserNotFound, GameNotFound, ScoreNotFound,
                      FriendRequestNotFound, InvalidResetToken):
        app.add_exception_handler(exc_class, not_found_handler)
    for exc_class in (ScoreNotHigher, SelfFriendRequest, AlreadyFriends,
                      FriendRequestPending, LastAdminRemoval):
        app.add_exception_handler(exc_class, business_rule_handler)
    app.add_exception_handler(NotScoreOwner, permission_denied_handler)
    app.add_exception_handler(PermissionDenied, permission_denied_handler)
    app.add_exception_handler(DuplicateAccount, duplicate_account_handler)
    app.add_exception_handler(InvalidCredentials, authentication_handler)
    app.add_exception_handler(NotAuthenticated, authentication_handler)
    app.add_exception_handler(OperationFailed, operation_failed_handler)
    app.add_exception_handler(LeaderboardException, leaderboard_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
