from __future__ import annotations

from pathlib import Path
from typing import Any

from private_notes.storage.files import atomic_write_json, read_json


class JsonEnrollmentProvider:
    """Course registry backed by a single JSON file.

    Layout::

        {
          "courses": {"5": {"enrolled": ["userA"]}},
          "lessons": {"12": 5}
        }

    The file is read on every lookup, so edits made by other tools are
    picked up without a restart.
    """

    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> dict[str, Any]:
        raw = read_json(self.path, {})
        if not isinstance(raw, dict):
            raise ValueError(f"Corrupted enrollment file {self.path}")
        raw.setdefault("courses", {})
        raw.setdefault("lessons", {})
        return raw

    def context_exists(self, context_id: int) -> bool:
        return str(context_id) in self._load()["courses"]

    def is_enrolled(self, user_id: str, context_id: int) -> bool:
        course = self._load()["courses"].get(str(context_id))
        if course is None:
            return False
        return user_id in course.get("enrolled", [])

    def context_for_resource(self, resource_id: int) -> int:
        data = self._load()
        if str(resource_id) in data["courses"]:
            return resource_id
        course_id = data["lessons"].get(str(resource_id))
        try:
            return int(course_id) if course_id else 0
        except (TypeError, ValueError):
            return 0

    def add_course(self, course_id: int) -> None:
        data = self._load()
        data["courses"].setdefault(str(course_id), {"enrolled": []})
        atomic_write_json(self.path, data)

    def add_lesson(self, lesson_id: int, course_id: int) -> None:
        data = self._load()
        data["lessons"][str(lesson_id)] = course_id
        atomic_write_json(self.path, data)

    def enroll(self, user_id: str, course_id: int) -> None:
        data = self._load()
        course = data["courses"].setdefault(str(course_id), {"enrolled": []})
        if user_id not in course["enrolled"]:
            course["enrolled"].append(user_id)
        atomic_write_json(self.path, data)
