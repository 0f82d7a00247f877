"""Password hashing for the account endpoints.

bcrypt through passlib's ``CryptContext``; if the bcrypt backend cannot be
loaded the context falls back to pbkdf2_sha256 so accounts still work.
``BCRYPT_ROUNDS`` optionally sets the cost for either scheme.
"""
from __future__ import annotations

import os
from typing import Optional

from passlib.context import CryptContext

from private_notes.logging_config import get_logger

logger = get_logger(__name__)


def _rounds() -> Optional[int]:
    raw = os.environ.get("BCRYPT_ROUNDS")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _build_context(scheme: str, rounds: Optional[int]) -> CryptContext:
    kwargs = {f"{scheme}__rounds": rounds} if rounds else {}
    return CryptContext(schemes=[scheme], deprecated="auto", **kwargs)


def _make_context() -> CryptContext:
    rounds = _rounds()
    try:
        ctx = _build_context("bcrypt", rounds)
        ctx.hash("probe")
        return ctx
    except Exception as exc:
        logger.warning("bcrypt unavailable (%s); using pbkdf2_sha256", exc)
        return _build_context("pbkdf2_sha256", rounds)


pwd_context = _make_context()


def hash_password(plain: str) -> str:
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # malformed or unknown hash
        return False
