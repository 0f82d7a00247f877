from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from private_notes.storage.files import atomic_write_json, read_json, safe_user_dir

DEFAULT_ROLES = ("subscriber",)


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    hashed_password: str
    created_at: str
    roles: tuple[str, ...] = field(default=DEFAULT_ROLES)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "hashed_password": self.hashed_password,
            "created_at": self.created_at,
            "roles": list(self.roles),
        }


class UsersStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _user_path(self, user_id: str) -> Path:
        return safe_user_dir(self.base_dir, user_id) / "user.json"

    def get(self, user_id: str) -> Optional[UserRecord]:
        raw = read_json(self._user_path(user_id), None)
        if raw is None:
            return None
        return UserRecord(
            user_id=raw["user_id"],
            hashed_password=raw["hashed_password"],
            created_at=raw["created_at"],
            roles=tuple(raw.get("roles", DEFAULT_ROLES)),
        )

    def create(self, user_id: str, hashed_password: str, roles: tuple[str, ...] = DEFAULT_ROLES) -> UserRecord:
        p = self._user_path(user_id)
        if p.exists():
            raise FileExistsError("User exists")

        rec = UserRecord(
            user_id=user_id,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc).isoformat(),
            roles=tuple(roles),
        )
        atomic_write_json(p, rec.to_dict())
        return rec

    def set_roles(self, user_id: str, roles: list[str] | tuple[str, ...]) -> UserRecord:
        """Replace a user's roles. Order matters: the first one is the primary role."""
        rec = self.get(user_id)
        if rec is None:
            raise KeyError(user_id)
        updated = UserRecord(
            user_id=rec.user_id,
            hashed_password=rec.hashed_password,
            created_at=rec.created_at,
            roles=tuple(roles),
        )
        atomic_write_json(self._user_path(user_id), updated.to_dict())
        return updated
