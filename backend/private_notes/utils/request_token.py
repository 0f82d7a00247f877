from __future__ import annotations

import hashlib
import hmac
import time
from typing import Optional


class RequestTokens:
    """Session-bound anti-forgery tokens.

    A token is an HMAC over (action, session id, tick). The tick advances
    every half lifetime and a token is accepted during its own tick and
    the next one, so it lives between ``ttl/2`` and ``ttl`` seconds.
    Anonymous callers use the empty session id.
    """

    def __init__(self, secret: str, ttl_seconds: int = 12 * 60 * 60):
        self.secret = secret
        self.ttl_seconds = ttl_seconds

    def _tick(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        return int(now // max(self.ttl_seconds / 2, 1))

    def _digest(self, action: str, session_id: str, tick: int) -> str:
        if not self.secret:
            raise RuntimeError("REQUEST_TOKEN_SECRET is not set")
        msg = f"{tick}|{action}|{session_id}".encode("utf-8")
        return hmac.new(self.secret.encode("utf-8"), msg, hashlib.sha256).hexdigest()

    def create(self, action: str, session_id: str = "", now: Optional[float] = None) -> str:
        return self._digest(action, session_id, self._tick(now))

    def verify(self, token: str, action: str, session_id: str = "", now: Optional[float] = None) -> bool:
        if not token or not self.secret:
            return False
        tick = self._tick(now)
        given = token.encode("utf-8", errors="replace")
        for candidate in (tick, tick - 1):
            # constant-time compare
            if hmac.compare_digest(self._digest(action, session_id, candidate).encode("ascii"), given):
                return True
        return False
