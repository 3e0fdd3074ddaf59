from fastapi import HTTPException

from features.common.exceptions.provider_exceptions import (
    InvalidLocation,
    NoTideDataError,
    TideError,
    WeatherError,
)
from features.common.exceptions.domain_exceptions import ConflictError, NotFoundError

def to_http_exception(error: Exception) -> HTTPException:
    """Map a service-layer exception to the HTTP status the API reports."""
    if isinstance(error, InvalidLocation):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, (NoTideDataError, NotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, (WeatherError, TideError)):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
