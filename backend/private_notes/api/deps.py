from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from private_notes.config import get_settings
from private_notes.core.gate import AuthorizationGate, CurrentUser, RequestContext
from private_notes.core.key_resolver import KeyResolver
from private_notes.core.service import NoteService
from private_notes.storage.attributes_store import AttributesStore
from private_notes.storage.enrollment_store import JsonEnrollmentProvider
from private_notes.storage.event_log import EventLog
from private_notes.storage.users_store import UsersStore
from private_notes.utils.jwt_auth import read_session
from private_notes.utils.request_token import RequestTokens

# module-level wiring; tests reload this module after changing the environment
settings = get_settings()

users = UsersStore(settings.data_dir)
attributes = AttributesStore(settings.data_dir)
event_log = EventLog(settings.data_dir)

# no registry configured means course scoping is off
enrollment = JsonEnrollmentProvider(settings.enrollment_file) if settings.enrollment_file else None

request_tokens = RequestTokens(settings.request_token_secret, settings.request_token_ttl_seconds)
keys = KeyResolver(enrollment)
gate = AuthorizationGate(request_tokens.verify)
notes_service = NoteService(gate, keys, attributes, event_log=event_log, max_length=settings.note_max_length)

bearer = HTTPBearer(auto_error=False)


def get_request_context(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    x_request_token: str | None = Header(default=None, alias="X-Request-Token"),
    x_context_id: str | None = Header(default=None, alias="X-Context-Id"),
) -> RequestContext:
    token = creds.credentials if creds is not None and creds.scheme.lower() == "bearer" else None
    claims = read_session(settings, token)
    if claims is None:
        return RequestContext(request_token=x_request_token, context_header=x_context_id)

    rec = users.get(claims.subject)
    user = CurrentUser(id=rec.user_id, roles=rec.roles) if rec is not None else None
    return RequestContext(
        request_token=x_request_token,
        session_id=claims.session_id,
        user=user,
        context_header=x_context_id,
    )
