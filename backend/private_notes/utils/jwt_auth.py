from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from private_notes.config import Settings


@dataclass(frozen=True)
class SessionClaims:
    subject: str
    session_id: str


def _secret(settings: Settings) -> str:
    if not settings.jwt_secret:
        # tests and dev set it in the environment; production must
        raise RuntimeError("JWT_SECRET is not set")
    return settings.jwt_secret


def create_access_token(settings: Settings, subject: str) -> str:
    """Issue a session token. Each login starts a new session id."""
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.jwt_exp_minutes)
    payload = {
        "sub": subject,
        "sid": uuid.uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, _secret(settings), algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> dict:
    return jwt.decode(token, _secret(settings), algorithms=[settings.jwt_algorithm])


def read_session(settings: Settings, token: Optional[str]) -> Optional[SessionClaims]:
    """Claims of a valid session token, or None for anything else.

    A bad or expired token means "logged out", not an error: the gate
    decides which status the caller gets.
    """
    if not token or not settings.jwt_secret:
        return None
    try:
        payload = decode_token(settings, token)
    except JWTError:
        return None
    sub = payload.get("sub")
    sid = payload.get("sid")
    if not sub or not sid:
        return None
    return SessionClaims(subject=str(sub), session_id=str(sid))
