from __future__ import annotations

from typing import Any, Optional, Protocol

from private_notes.core.errors import (
    NoteErrorKind,
    ServiceResponse,
    save_failure,
    save_success,
)
from private_notes.core.gate import AuthorizationGate, Denied, RequestContext
from private_notes.core.key_resolver import KeyResolver
from private_notes.core.sanitizer import sanitize_for_display, sanitize_for_storage
from private_notes.logging_config import get_logger
from private_notes.storage.event_log import Event, EventLog

logger = get_logger(__name__)

NOTE_MAX_LENGTH = 10_000


class AttributeStore(Protocol):
    def get_attribute(self, user_id: str, key: str) -> Optional[str]: ...

    def set_attribute(self, user_id: str, key: str, value: str) -> bool: ...


class NoteService:
    def __init__(
        self,
        gate: AuthorizationGate,
        keys: KeyResolver,
        store: AttributeStore,
        event_log: Optional[EventLog] = None,
        max_length: int = NOTE_MAX_LENGTH,
    ):
        self.gate = gate
        self.keys = keys
        self.store = store
        self.event_log = event_log
        self.max_length = max_length

    def fetch(self, ctx: RequestContext) -> ServiceResponse:
        auth = self.gate.authorize(ctx)
        if isinstance(auth, Denied):
            return auth.to_response()

        key = self.keys.resolve(auth.owner_id, ctx.context_header)
        stored = self.store.get_attribute(auth.owner_id, key) or ""
        return ServiceResponse(status=200, body={"note": sanitize_for_display(stored)})

    def save(self, ctx: RequestContext, raw_note: Any) -> ServiceResponse:
        auth = self.gate.authorize(ctx)
        if isinstance(auth, Denied):
            return auth.to_response()

        note = sanitize_for_storage(raw_note)

        if len(note) > self.max_length:
            return save_failure(
                NoteErrorKind.TOO_LONG,
                f"Note exceeds the maximum allowed length of {self.max_length} characters.",
            )

        if not note:
            return save_failure(NoteErrorKind.INVALID_DATA, "Invalid note data")

        key = self.keys.resolve(auth.owner_id, ctx.context_header)
        current = self.store.get_attribute(auth.owner_id, key)

        if current == note:
            logger.debug("note %s for user %s unchanged, skipping write", key, auth.owner_id)
            return save_success("No changes were made to the note.")

        if not self.store.set_attribute(auth.owner_id, key, note):
            logger.error("failed to persist note %s for user %s", key, auth.owner_id)
            return save_failure(
                NoteErrorKind.PERSISTENCE_FAILURE,
                "Failed to save the note. Please try again.",
            )

        if self.event_log is not None:
            # the note is already written; a failed audit append must not hide that
            try:
                self.event_log.emit(Event(
                    event_type="NOTE_SAVED",
                    user_id=auth.owner_id,
                    meta={"key": key, "length": len(note)},
                ))
            except OSError:
                logger.exception("failed to audit note %s for user %s", key, auth.owner_id)

        return save_success("Note saved successfully.")
