from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class ApiError(Exception):
    status_code: int
    message: str
    response_text: Optional[str] = None

    def __post_init__(self):
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.response_text:
            return f"{self.status_code}: {self.message} | {self.response_text}"
        return f"{self.status_code}: {self.message}"


class TransportError(ApiError):
    """Request never reached the service or never returned (status 0)."""


class BadRequest(ApiError):
    """400"""


class Unauthorized(ApiError):
    """401 - session is gone; callers must not try to recover locally."""


class Forbidden(ApiError):
    """403"""


class NotFound(ApiError):
    """404"""


class Conflict(ApiError):
    """409"""


class ServerError(ApiError):
    """5xx"""


class MalformedResponse(ApiError):
    """2xx whose body does not decode as the JSON it claims to be."""
