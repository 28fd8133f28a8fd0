from typing import Optional
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from utils.logger import get_logger

logger = get_logger("Global_Exception")


class AppException(HTTPException):
    """
    Base for every failure the service raises on purpose.
    `extra` is merged into the JSON body next to `message`.
    """
    def __init__(self, status_code: int, detail: str, extra: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.extra = extra or {}


class BadRequestError(AppException):
    def __init__(self, detail: str = "bad request", extra: Optional[dict] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, extra)


class UnauthorizedError(AppException):
    def __init__(self, detail: str = "unauthorized", extra: Optional[dict] = None):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail, extra)


class ForbiddenError(AppException):
    def __init__(self, detail: str = "unauthorized", extra: Optional[dict] = None):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, extra)


class NotFoundError(AppException):
    def __init__(self, detail: str = "not found", extra: Optional[dict] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, extra)


class ConflictError(AppException):
    def __init__(self, detail: str = "conflict", extra: Optional[dict] = None):
        super().__init__(status.HTTP_409_CONFLICT, detail, extra)


class InternalFailureError(AppException):
    def __init__(self, detail: str = "Internal server error", extra: Optional[dict] = None):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, extra)


async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, **exc.extra},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # unmatched routes land here as plain starlette 404s
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(status_code=404, content={"message": "unknown endpoint"})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path}
    )
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg', 'invalid request')}" if field else first.get("msg", "invalid request")
    logger.info(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"message": message})
