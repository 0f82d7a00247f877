import re

import pytest

from private_notes.core.sanitizer import ALLOWED_TAGS, sanitize_for_display, sanitize_for_storage

TAG_RE = re.compile(r"<\s*/?\s*([A-Za-z][A-Za-z0-9-]*)([^>]*)>")

TRICKY_INPUTS = [
    "",
    "plain text",
    "<script>alert(1)</script><p>Hi <b>there</b></p>",
    '<p class="x" onclick="steal()">t</p>',
    "<P>Upper</P><EM>case</EM>",
    '<a href="javascript:alert(1)">link</a>',
    "<p>a<!-- hidden -->b</p>",
    "<p>a &amp; b &lt;i&gt; c</p>",
    "<style>p { color: red }</style><em>x</em>",
    "<ul><li>one<li>two</ul>",
    "<img src=x onerror=alert(1)>",
    "a < b > c",
    '<p title="a>b">quoted</p>',
    "<p>unterminated <strong",
    "<![CDATA[x]]><!DOCTYPE html><?php echo 1 ?>",
    "<br/><p/><script/>after",
    "&lt;script&gt;alert(1)&lt;/script&gt;",
    "<scr<script>ipt>alert(1)</script>",
]


def _assert_closed_over_allow_list(out: str) -> None:
    for name, attrs in TAG_RE.findall(out):
        assert name in ALLOWED_TAGS
        assert attrs.strip() == ""


def test_example_from_script_and_bold():
    raw = "<script>alert(1)</script><p>Hi <b>there</b></p>"
    assert sanitize_for_storage(raw) == "<p>Hi there</p>"


def test_attributes_are_stripped_from_allowed_tags():
    assert sanitize_for_storage('<p class="x" onclick="steal()">t</p>') == "<p>t</p>"
    assert sanitize_for_storage('<strong style="color:red">s</strong>') == "<strong>s</strong>"


def test_tag_names_are_case_insensitive():
    assert sanitize_for_storage("<P>Upper</P><EM>case</EM>") == "<p>Upper</p><em>case</em>"


def test_disallowed_tags_keep_their_text():
    assert sanitize_for_storage('<a href="javascript:alert(1)">link</a>') == "link"
    assert sanitize_for_storage("<div><span>x</span></div>") == "x"


def test_script_like_content_is_removed():
    assert sanitize_for_storage("<style>p { color: red }</style><em>x</em>") == "<em>x</em>"
    assert sanitize_for_storage("<p>a</p><script>var x = '<p>';</script>") == "<p>a</p>"


def test_comments_and_declarations_are_removed():
    assert sanitize_for_storage("<p>a<!-- hidden -->b</p>") == "<p>ab</p>"
    assert sanitize_for_storage("<!DOCTYPE html><p>x</p>") == "<p>x</p>"


def test_text_is_escaped():
    assert sanitize_for_storage("<p>a &amp; b &lt;i&gt; c</p>") == "<p>a &amp; b &lt;i&gt; c</p>"
    assert sanitize_for_storage("a < b > c") == "a &lt; b &gt; c"


def test_quoted_angle_bracket_in_attribute():
    assert sanitize_for_storage('<p title="a>b">quoted</p>') == "<p>quoted</p>"


@pytest.mark.parametrize("value", [None, 42, ["<p>x</p>"], {"note": "x"}, ""])
def test_non_string_or_empty_input_gives_empty_string(value):
    assert sanitize_for_storage(value) == ""
    assert sanitize_for_display(value) == ""


@pytest.mark.parametrize("raw", TRICKY_INPUTS)
def test_storage_is_idempotent(raw):
    once = sanitize_for_storage(raw)
    assert sanitize_for_storage(once) == once


@pytest.mark.parametrize("raw", TRICKY_INPUTS)
def test_storage_output_only_has_allowed_bare_tags(raw):
    _assert_closed_over_allow_list(sanitize_for_storage(raw))


@pytest.mark.parametrize("raw", TRICKY_INPUTS)
def test_display_of_stored_content_is_safe(raw):
    _assert_closed_over_allow_list(sanitize_for_display(sanitize_for_storage(raw)))


def test_display_escapes_disallowed_tags_as_text():
    stored = "<p>Hi</p><script>alert(1)</script>"
    assert sanitize_for_display(stored) == "<p>Hi</p>&lt;script&gt;alert(1)&lt;/script&gt;"


def test_display_escapes_foreign_tags_with_attributes():
    stored = "<p>x</p><img src=x onerror=alert(1)>"
    assert sanitize_for_display(stored) == "<p>x</p>&lt;img src=x onerror=alert(1)&gt;"
    assert sanitize_for_display("<b>bold</b>") == "&lt;b&gt;bold&lt;/b&gt;"


def test_display_keeps_allowed_tags_but_drops_attributes():
    assert sanitize_for_display('<p class="x">t</p>') == "<p>t</p>"
    assert sanitize_for_display("<UL><LI>one</LI></UL>") == "<ul><li>one</li></ul>"


def test_display_leaves_clean_content_unchanged():
    clean = "<p>Notes on <em>week 1</em></p><ul><li>a &amp; b</li></ul>"
    assert sanitize_for_display(clean) == clean


def test_void_tags_do_not_swallow_following_text():
    assert sanitize_for_storage('<embed src="x.swf"><p>after</p>') == "<p>after</p>"
    assert sanitize_for_storage("<img src=x>kept") == "kept"
