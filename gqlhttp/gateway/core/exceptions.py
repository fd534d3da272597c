"""
Custom exception classes.

Represent errors raised while ingesting a GraphQL HTTP request. Every error
carries an HTTP status code and a client-facing message.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class GraphQLHTTPError(Exception):
    """Base exception class for request ingestion failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int | None = None):
        if status_code is not None:
            self.status_code = status_code
        self.message = message
        super().__init__(message)


class UnsupportedCharset(GraphQLHTTPError):
    """Raised when the Content-Type charset cannot be decoded."""

    status_code = 415

    def __init__(self, charset: str):
        self.charset = charset
        super().__init__(f'Unsupported charset "{charset.upper()}".')


class UnsupportedEncoding(GraphQLHTTPError):
    """Raised for a Content-Encoding other than identity, deflate or gzip."""

    status_code = 415

    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f'Unsupported content-encoding "{encoding}".')


class PayloadTooLarge(GraphQLHTTPError):
    """Raised when the decompressed body exceeds the size ceiling."""

    status_code = 413

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__("Invalid body: request entity too large.")


class MalformedBody(GraphQLHTTPError):
    """Raised when reading or decompressing the body fails."""

    def __init__(self, cause: Exception | str):
        self.cause = cause
        detail = str(cause).rstrip(".") or type(cause).__name__
        super().__init__(f"Invalid body: {detail}.")


class InvalidJSON(GraphQLHTTPError):
    """Raised when a JSON body is not a JSON object."""

    def __init__(self):
        super().__init__("POST body sent invalid JSON.")


class InvalidVariables(GraphQLHTTPError):
    """Raised when the variables parameter is not a JSON object."""

    def __init__(self):
        super().__init__("Variables are invalid JSON.")


class MissingQuery(GraphQLHTTPError):
    """Raised when no GraphQL query was provided."""

    def __init__(self):
        super().__init__("Must provide query string.")


class ExecutorUnavailableError(GraphQLHTTPError):
    """Raised when the GraphQL executor cannot be reached or replies garbage."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__("Bad Gateway")


# ===========================================
# Exception Handlers
# ===========================================


async def graphql_http_error_handler(request: Request, exc: GraphQLHTTPError):
    """
    Handler for ingestion errors, shaped as a GraphQL error response.
    """
    logger.warning(
        f"Rejected request: {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": [{"message": exc.message}]},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    error_detail = str(exc)
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": error_detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(
        status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for validation errors.
    """
    return JSONResponse(
        status_code=422,
        content={"message": "Validation Error", "detail": str(exc.errors())},
    )
