"""Allow-list sanitizer for note markup.

Notes may only contain ``p``, ``em``, ``strong``, ``ul`` and ``li`` tags and
none of them may carry attributes. Both directions tokenize the input with
``html.parser.HTMLParser`` and reserialize it:

- ``sanitize_for_storage`` drops every other tag (and the content of
  script-like elements) before a note is written.
- ``sanitize_for_display`` turns every other tag into visible escaped text
  and then runs the storage pass again, so content that reached the store
  by other means is never rendered as live markup.

Neither function raises; anything that is not a string becomes ``""``.
"""
from __future__ import annotations

import html
from html.parser import HTMLParser
from typing import Any

ALLOWED_TAGS = frozenset({"p", "em", "strong", "ul", "li"})

# Elements removed together with everything inside them. Void elements
# (embed, img, ...) are not listed: they have no content and no end tag.
DROP_CONTENT_TAGS = frozenset({
    "script", "style", "iframe", "object", "template", "noscript", "textarea",
    "title", "xmp", "noembed", "noframes", "svg", "math",
})


def _escape_text(text: str) -> str:
    return html.escape(text, quote=False)


class _AllowListParser(HTMLParser):
    def __init__(self, allowed_tags: frozenset[str] = ALLOWED_TAGS):
        super().__init__(convert_charrefs=True)
        self.allowed_tags = allowed_tags
        self._out: list[str] = []

    def render(self, content: str) -> str:
        self.feed(content)
        self.close()
        return "".join(self._out)

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)
        if tag in self.allowed_tags:
            self.handle_endtag(tag)

    def handle_data(self, data):
        self._out.append(_escape_text(data))


class _StorageCleaner(_AllowListParser):
    def __init__(self, allowed_tags: frozenset[str] = ALLOWED_TAGS):
        super().__init__(allowed_tags)
        self._skip_tag: str | None = None
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if self._skip_tag is not None:
            if tag == self._skip_tag:
                self._skip_depth += 1
            return
        if tag in self.allowed_tags:
            self._out.append(f"<{tag}>")
        elif tag in DROP_CONTENT_TAGS:
            self._skip_tag = tag
            self._skip_depth = 1

    def handle_startendtag(self, tag, attrs):
        # <script/> has no content to skip
        if tag in DROP_CONTENT_TAGS:
            return
        super().handle_startendtag(tag, attrs)

    def handle_endtag(self, tag):
        if self._skip_tag is not None:
            if tag == self._skip_tag:
                self._skip_depth -= 1
                if self._skip_depth == 0:
                    self._skip_tag = None
            return
        if tag in self.allowed_tags:
            self._out.append(f"</{tag}>")

    def handle_data(self, data):
        if self._skip_tag is None:
            super().handle_data(data)

    # comments, doctypes, processing instructions and CDATA are dropped
    def handle_comment(self, data):
        pass

    def handle_decl(self, decl):
        pass

    def handle_pi(self, data):
        pass

    def unknown_decl(self, data):
        pass


class _DisplayEscaper(_AllowListParser):
    def handle_starttag(self, tag, attrs):
        raw = self.get_starttag_text() or f"<{tag}>"
        if tag in self.allowed_tags:
            self._out.append(raw)
        else:
            self._out.append(_escape_text(raw))

    def handle_startendtag(self, tag, attrs):
        raw = self.get_starttag_text() or f"<{tag} />"
        if tag in self.allowed_tags:
            self._out.append(f"<{tag}></{tag}>")
        else:
            self._out.append(_escape_text(raw))

    def handle_endtag(self, tag):
        if tag in self.allowed_tags:
            self._out.append(f"</{tag}>")
        else:
            self._out.append(_escape_text(f"</{tag}>"))

    def handle_comment(self, data):
        self._out.append(_escape_text(f"<!--{data}-->"))

    def handle_decl(self, decl):
        self._out.append(_escape_text(f"<!{decl}>"))

    def handle_pi(self, data):
        self._out.append(_escape_text(f"<?{data}>"))

    def unknown_decl(self, data):
        self._out.append(_escape_text(f"<![{data}]>"))


def sanitize_for_storage(raw: Any) -> str:
    """Keep only allow-listed tags, without attributes."""
    if not isinstance(raw, str) or not raw:
        return ""
    return _StorageCleaner().render(raw)


def sanitize_for_display(stored: Any) -> str:
    """Escape non-allow-listed tags as visible text, then clean again."""
    if not isinstance(stored, str) or not stored:
        return ""
    return sanitize_for_storage(_DisplayEscaper().render(stored))
