from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_passcode(low: int = 10000, high: int = 99999) -> str:
    """Numeric code drawn uniformly from [low, high], both ends included."""
    if low > high:
        raise ValueError(f"empty passcode range [{low}, {high}]")
    return str(low + secrets.randbelow(high - low + 1))


def normalize_identity(identity: str | None) -> str | None:
    if identity is None:
        return None
    normalized = identity.strip().lower()
    return normalized or None


def normalize_code(code: str | int | None) -> str | None:
    if code is None:
        return None
    normalized = str(code).strip()
    return normalized or None
