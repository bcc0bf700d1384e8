"""
Map domain errors to HTTP responses.

Routes call services inside `with domain_errors():` so every error kind
lands on one status code:
- NotFoundError 404
- PermissionDenied 403
- ConcurrencyConflict / ScheduleExistsError 409
- ScoreValidationError 422 (detail carries every error and warning)
- CapacityError / ConfigurationError 400
"""
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from pickleball.errors import (
    CapacityError,
    ConcurrencyConflict,
    ConfigurationError,
    NotFoundError,
    PermissionDenied,
    PickleballError,
    ScheduleExistsError,
    ScoreValidationError,
)


def to_http_exception(err: PickleballError) -> HTTPException:
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=404, detail=str(err))
    if isinstance(err, PermissionDenied):
        return HTTPException(status_code=403, detail=str(err))
    if isinstance(err, ConcurrencyConflict):
        return HTTPException(
            status_code=409,
            detail={
                "code": "VERSION_CONFLICT",
                "message": str(err),
                "expected_version": err.expected_version,
                "current_version": err.current_version,
            },
        )
    if isinstance(err, ScheduleExistsError):
        return HTTPException(status_code=409, detail=str(err))
    if isinstance(err, ScoreValidationError):
        return HTTPException(status_code=422, detail={"errors": err.errors, "warnings": err.warnings})
    if isinstance(err, (CapacityError, ConfigurationError)):
        return HTTPException(status_code=400, detail=str(err))
    return HTTPException(status_code=500, detail=str(err))


@contextmanager
def domain_errors() -> Iterator[None]:
    try:
        yield
    except PickleballError as e:
        raise to_http_exception(e) from e
