"""
Response envelope helpers.

Every JSON body leaves the API as ``{success, message, data}`` on success or
``{success: false, message, error_code, details}`` on failure. The ``*_error``
helpers raise ``HTTPException``; the handler in ``main.py`` renders it through
``error_response``.
"""

from typing import Any, NoReturn, Optional
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.schemas.common import StandardResponse, ErrorResponse

def _envelope(body: BaseModel, status_code: int) -> JSONResponse:
    # jsonable_encoder applies the camelCase aliases of nested schemas
    return JSONResponse(content=jsonable_encoder(body), status_code=status_code)

def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return _envelope(StandardResponse(success=True, message=message, data=data), status_code)

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    return _envelope(ErrorResponse(message=message, error_code=error_code, details=details), status_code)

def bad_request_error(message: str) -> NoReturn:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

def not_found_error(resource: str = "Resource") -> NoReturn:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} not found")

def unauthorized_error(message: str = "Unauthorized") -> NoReturn:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)

def forbidden_error(message: str = "Forbidden") -> NoReturn:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
