from __future__ import annotations

import re
from typing import Callable, Optional, Protocol

NOTE_BASE_KEY = "private_student_note"

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_]")
_CONTEXT_ID_RE = re.compile(r"\d+", re.ASCII)


class EnrollmentProvider(Protocol):
    def context_exists(self, context_id: int) -> bool: ...

    def is_enrolled(self, user_id: str, context_id: int) -> bool: ...

    def context_for_resource(self, resource_id: int) -> int: ...


def sanitize_key(key: str) -> str:
    return _UNSAFE_KEY_CHARS.sub("", key.lower())


def parse_context_id(value: Optional[str]) -> int:
    """Return the positive integer in a context header, or 0."""
    if value is None:
        return 0
    # plain ASCII digits only; int() alone also takes "+5", "5_0" and non-ASCII digits
    digits = str(value).strip()
    if not _CONTEXT_ID_RE.fullmatch(digits):
        return 0
    context_id = int(digits)
    return context_id if context_id > 0 else 0


def resolve_key(
    owner_id: str,
    context_header_value: Optional[str],
    context_exists_fn: Optional[Callable[[int], bool]] = None,
    is_enrolled_fn: Optional[Callable[[str, int], bool]] = None,
    base_key: str = NOTE_BASE_KEY,
) -> str:
    if context_exists_fn is None or is_enrolled_fn is None:
        return base_key

    context_id = parse_context_id(context_header_value)
    if not context_id:
        return base_key

    if not context_exists_fn(context_id):
        return base_key

    if not is_enrolled_fn(owner_id, context_id):
        return base_key

    return sanitize_key(f"{base_key}_{context_id}")


class KeyResolver:
    """Binds ``resolve_key`` to an optional enrollment provider."""

    def __init__(self, enrollment: Optional[EnrollmentProvider] = None, base_key: str = NOTE_BASE_KEY):
        self.enrollment = enrollment
        self.base_key = base_key

    @property
    def scoping_enabled(self) -> bool:
        return self.enrollment is not None

    def resolve(self, owner_id: str, context_header_value: Optional[str]) -> str:
        if self.enrollment is None:
            return self.base_key
        return resolve_key(
            owner_id,
            context_header_value,
            self.enrollment.context_exists,
            self.enrollment.is_enrolled,
            base_key=self.base_key,
        )

    def context_for_resource(self, resource_id: Optional[int]) -> int:
        if self.enrollment is None or not resource_id:
            return 0
        return self.enrollment.context_for_resource(resource_id)
