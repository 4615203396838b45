from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ApiStatus(str, Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SERVER_ERROR = "SERVER_ERROR"


class BaseResponse(BaseModel):
    """Standard envelope returned by the read-side services."""
    status: ApiStatus
    message: str
    data: Optional[Any] = None
