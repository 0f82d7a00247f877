import pytest

from private_notes.core.key_resolver import (
    NOTE_BASE_KEY,
    KeyResolver,
    parse_context_id,
    resolve_key,
    sanitize_key,
)


class FakeEnrollment:
    def __init__(self, courses=None, lessons=None):
        # course id -> set of enrolled user ids
        self.courses = courses or {}
        self.lessons = lessons or {}
        self.calls = []

    def context_exists(self, context_id):
        self.calls.append(("exists", context_id))
        return context_id in self.courses

    def is_enrolled(self, user_id, context_id):
        self.calls.append(("enrolled", user_id, context_id))
        return user_id in self.courses.get(context_id, set())

    def context_for_resource(self, resource_id):
        if resource_id in self.courses:
            return resource_id
        return self.lessons.get(resource_id, 0)


@pytest.mark.parametrize("value, expected", [
    (None, 0),
    ("", 0),
    ("0", 0),
    ("abc", 0),
    ("-3", 0),
    ("5", 5),
    (" 7 ", 7),
    ("1.5", 0),
    ("5abc", 0),
    ("+5", 0),
    ("5_0", 0),
    ("٥", 0),
])
def test_parse_context_id(value, expected):
    assert parse_context_id(value) == expected


def test_sanitize_key_keeps_only_safe_chars():
    assert sanitize_key("Private_Student_Note_5") == "private_student_note_5"
    assert sanitize_key("note-5; drop") == "note5drop"


def test_not_enrolled_uses_default_key():
    e = FakeEnrollment(courses={5: {"other"}})
    assert resolve_key("userA", "5", e.context_exists, e.is_enrolled) == NOTE_BASE_KEY


def test_enrolled_uses_course_key():
    e = FakeEnrollment(courses={5: {"userA"}})
    assert resolve_key("userA", "5", e.context_exists, e.is_enrolled) == f"{NOTE_BASE_KEY}_5"


def test_unknown_context_skips_enrollment_lookup():
    e = FakeEnrollment(courses={})
    assert resolve_key("userA", "9", e.context_exists, e.is_enrolled) == NOTE_BASE_KEY
    assert e.calls == [("exists", 9)]


@pytest.mark.parametrize("header", [None, "", "0", "nope"])
def test_missing_or_bad_header_uses_default_key(header):
    e = FakeEnrollment(courses={5: {"userA"}})
    assert resolve_key("userA", header, e.context_exists, e.is_enrolled) == NOTE_BASE_KEY
    assert e.calls == []


def test_scoping_disabled_without_lookups():
    assert resolve_key("userA", "5") == NOTE_BASE_KEY
    assert KeyResolver(None).resolve("userA", "5") == NOTE_BASE_KEY
    assert KeyResolver(None).scoping_enabled is False


def test_resolver_is_deterministic():
    e = FakeEnrollment(courses={5: {"userA"}})
    keys = KeyResolver(e)
    assert keys.resolve("userA", "5") == keys.resolve("userA", "5") == f"{NOTE_BASE_KEY}_5"
    assert keys.resolve("userB", "5") == NOTE_BASE_KEY


def test_context_for_resource():
    e = FakeEnrollment(courses={5: set()}, lessons={12: 5})
    keys = KeyResolver(e)
    assert keys.context_for_resource(5) == 5
    assert keys.context_for_resource(12) == 5
    assert keys.context_for_resource(99) == 0
    assert keys.context_for_resource(None) == 0
    assert KeyResolver(None).context_for_resource(12) == 0


@pytest.mark.parametrize("header", ["+5", "5_0", "٥"])
def test_non_ascii_or_signed_headers_use_default_key(header):
    e = FakeEnrollment(courses={5: {"userA"}, 50: {"userA"}})
    assert resolve_key("userA", header, e.context_exists, e.is_enrolled) == NOTE_BASE_KEY
    assert e.calls == []
