# Pydantic schemas package
from calendar_server.schemas.base import ErrorResponse, ResultResponse

__all__ = [
    "ErrorResponse",
    "ResultResponse",
]
