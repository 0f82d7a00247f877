from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from private_notes.core.errors import NoteErrorKind, ServiceResponse, error_response
from private_notes.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_TOKEN_ACTION = "rest_session"
ALLOWED_ROLES = frozenset({"administrator", "editor", "subscriber"})


@dataclass(frozen=True)
class CurrentUser:
    id: str
    roles: tuple[str, ...] = ()

    @property
    def primary_role(self) -> Optional[str]:
        return self.roles[0] if self.roles else None


@dataclass(frozen=True)
class RequestContext:
    """Everything the gate and the note service read from one request."""

    request_token: Optional[str]
    session_id: str = ""
    user: Optional[CurrentUser] = None
    context_header: Optional[str] = None


@dataclass(frozen=True)
class Authorized:
    owner_id: str


@dataclass(frozen=True)
class Denied:
    reason: NoteErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return self.reason.status

    def to_response(self) -> ServiceResponse:
        return error_response(self.reason, self.message)


AuthResult = Union[Authorized, Denied]

# verify(token, action, session_id) -> bool
TokenVerifier = Callable[[str, str, str], bool]


class AuthorizationGate:
    def __init__(
        self,
        verify_token: TokenVerifier,
        allowed_roles: frozenset[str] = ALLOWED_ROLES,
        action: str = REQUEST_TOKEN_ACTION,
    ):
        self.verify_token = verify_token
        self.allowed_roles = allowed_roles
        self.action = action

    def authorize(self, ctx: RequestContext) -> AuthResult:
        # token is checked before the session so anonymous direct calls get 403
        if not ctx.request_token:
            logger.info("denied: missing request token")
            return Denied(NoteErrorKind.INVALID_TOKEN, "CSRF check failed")

        if not self.verify_token(ctx.request_token, self.action, ctx.session_id):
            logger.info("denied: invalid or expired request token")
            return Denied(NoteErrorKind.INVALID_TOKEN, "CSRF check failed")

        if ctx.user is None:
            logger.info("denied: not logged in")
            return Denied(NoteErrorKind.UNAUTHORIZED, "User not logged in")

        # only the first assigned role is considered
        if ctx.user.primary_role not in self.allowed_roles:
            logger.info("denied: user %s has role %r", ctx.user.id, ctx.user.primary_role)
            return Denied(NoteErrorKind.FORBIDDEN, "Sorry, you are not allowed to do that.")

        return Authorized(owner_id=ctx.user.id)
