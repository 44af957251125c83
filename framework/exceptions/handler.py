from enum import Enum
from typing import Any
from fastapi import Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from framework.logging.logger import get_logger
from framework.response import ResponseModel

# Body returned for every failure the client should learn nothing about
GENERIC_ERROR_MESSAGE = "Internal server error"


class ErrorKind(str, Enum):
    """Error classification used by the HTTP boundary to pick a status code."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"
    BUSINESS = "business"


class BusinessException(Exception):
    """Base class for business exceptions."""
    kind: ErrorKind = ErrorKind.BUSINESS

    def __init__(self, message: str, status_code: int = 400, code: int = 400, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail


class ValidationError(BusinessException):
    """Bad input shape for a create/update path."""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message, status_code=400, code=400, detail=detail)


class NotFoundError(BusinessException):
    """Requested identity is absent from the store."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identity: Any):
        super().__init__(
            f"{entity} with id {identity} does not exist",
            status_code=404,
            code=404,
            detail={"entity": entity, "id": identity},
        )
        self.entity = entity
        self.identity = identity


class PersistenceError(BusinessException):
    """The store rejected a read or the commit of staged writes."""
    kind = ErrorKind.PERSISTENCE

    def __init__(self, operation: str, entity_types: tuple = (), detail: Any = None):
        super().__init__(
            f"Persistence failure during {operation}",
            status_code=500,
            code=500,
            detail=detail,
        )
        self.operation = operation
        self.entity_types = entity_types


def _generic_error_response() -> PlainTextResponse:
    return PlainTextResponse(
        GENERIC_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler; classifies by error kind."""
    trace_id = getattr(request.state, "trace_id", "unknown")
    # Bound per call so the sink prefix carries this request's trace id
    logger = get_logger("exception_handler", request)

    if isinstance(exc, BusinessException):
        if exc.kind is ErrorKind.PERSISTENCE:
            logger.critical(
                f"Trace[{trace_id}] - PersistenceError: operation={exc.operation} "
                f"entities={list(exc.entity_types)} detail={exc.detail}"
            )
            return _generic_error_response()

        if exc.kind is ErrorKind.NOT_FOUND:
            logger.info(f"Trace[{trace_id}] - NotFound: {exc.message}")
        else:
            logger.warning(f"Trace[{trace_id}] - {exc.kind.value}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(code=exc.code, message=exc.message)
        )

    if isinstance(exc, RequestValidationError):
        logger.error(f"Trace[{trace_id}] - RequestValidationError: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ResponseModel.fail(code=422, message="Invalid request parameters", data=jsonable_encoder(exc.errors()))
        )

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"Trace[{trace_id}] - DatabaseError: {type(exc).__name__}: {exc}")
        return _generic_error_response()

    logger.opt(exception=exc).error(f"Trace[{trace_id}] - UncaughtException: {exc}")
    return _generic_error_response()
