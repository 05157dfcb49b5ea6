from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Passcode:
    identity: str
    code: str
    issued_at: datetime

    def is_expired(self, now: datetime, expiry: timedelta) -> bool:
        # the boundary itself still counts as valid
        return now - self.issued_at > expiry


@dataclass(frozen=True)
class RequestLogEntry:
    identity: str
    at: datetime


class Gate(str, Enum):
    CLEAR = "clear"
    THROTTLED = "throttled"


class Verification(str, Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Issued:
    """Outcome of a passcode issuance. The code is for internal use only."""

    code: str
    delivery_error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.delivery_error is None


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DELIVERY_FAILED = "delivery_failed"


@dataclass(frozen=True)
class Reply:
    """
    What the dispatcher answers for one action.

    Either `body` is the JSON payload of a normal outcome (including throttling
    and failed verification), or `error` names the failure kind and `message`
    carries the text shown to the caller.
    """

    body: dict[str, Any] = field(default_factory=dict)
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls, **body: Any) -> "Reply":
        return cls(body=body)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Reply":
        return cls(error=kind, message=message)

    @property
    def is_error(self) -> bool:
        return self.error is not None
