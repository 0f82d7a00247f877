from pathlib import Path
from typing import Optional

from private_notes.logging_config import get_logger
from private_notes.storage.files import atomic_write_json, read_json, safe_user_dir

logger = get_logger(__name__)


def _attributes_path(base_dir: Path, user_id: str) -> Path:
    # data/users/<user>/attributes.json
    return safe_user_dir(base_dir, user_id) / "attributes.json"


class AttributesStore:
    """Arbitrary string attributes per user, one JSON object per user."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _load(self, user_id: str) -> dict[str, str]:
        raw = read_json(_attributes_path(self.base_dir, user_id), {})
        if not isinstance(raw, dict):
            raise ValueError(f"Corrupted attributes file for user {user_id}")
        return raw

    def get_attribute(self, user_id: str, key: str) -> Optional[str]:
        try:
            value = self._load(user_id).get(key)
        except (OSError, ValueError):
            # unreadable or corrupted file reads as "no value"
            logger.exception("could not read attributes for user %s", user_id)
            return None
        return value if isinstance(value, str) else None

    def set_attribute(self, user_id: str, key: str, value: str) -> bool:
        path = _attributes_path(self.base_dir, user_id)
        try:
            attrs = self._load(user_id)
            attrs[key] = value
            atomic_write_json(path, attrs)
        except (OSError, ValueError):
            logger.exception("could not write attributes for user %s", user_id)
            return False
        return True
