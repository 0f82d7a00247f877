from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NoteErrorKind(Enum):
    """Stable machine-checkable failure codes with their HTTP status."""

    INVALID_TOKEN = ("invalid_token", 403)
    UNAUTHORIZED = ("unauthorized", 401)
    FORBIDDEN = ("forbidden", 403)
    INVALID_DATA = ("invalid_data", 400)
    TOO_LONG = ("too_long", 400)
    PERSISTENCE_FAILURE = ("persistence_failure", 500)

    def __init__(self, code: str, status: int):
        self.code = code
        self.status = status


@dataclass(frozen=True)
class ServiceResponse:
    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def error_response(kind: NoteErrorKind, message: str) -> ServiceResponse:
    # shape used by the authorization gate
    return ServiceResponse(
        status=kind.status,
        body={"code": kind.code, "message": message, "data": {"status": kind.status}},
    )


def save_failure(kind: NoteErrorKind, message: str) -> ServiceResponse:
    return ServiceResponse(
        status=kind.status,
        body={"success": False, "code": kind.code, "message": message},
    )


def save_success(message: str) -> ServiceResponse:
    return ServiceResponse(status=200, body={"success": True, "message": message})
