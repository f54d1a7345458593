"""Sanitization of translator output.

Machine translators echo back markup, and a compromised or misbehaving one
could inject active content. Every translated string passes through
``sanitize_translation`` before it is stored.
"""

import html
import re
from typing import Optional

ALLOWED_TAGS = frozenset(
    {
        "a", "abbr", "b", "blockquote", "br", "code", "div", "em", "h1", "h2",
        "h3", "h4", "h5", "h6", "hr", "i", "img", "li", "ol", "p", "pre",
        "s", "span", "strong", "sub", "sup", "table", "tbody", "td", "th",
        "thead", "tr", "u", "ul",
    }
)
ALLOWED_ATTRIBUTES = frozenset(
    {"alt", "class", "dir", "height", "href", "lang", "rel", "src", "target", "title", "width"}
)
URL_ATTRIBUTES = frozenset({"href", "src"})

# Blocks removed together with their content
_BLOCK_RE = re.compile(
    r"<\s*(script|style|iframe|object)\b[^>]*>.*?<\s*/\s*\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<\s*(/?)\s*([a-zA-Z][a-zA-Z0-9]*)([^>]*)>")
_ATTR_RE = re.compile(
    r"""([a-zA-Z_:][-a-zA-Z0-9_:.]*)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s"'>]+))?"""
)
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_WHITESPACE_RE = re.compile(r"\s+")
# "<" that does not open a kept tag, e.g. an unterminated "<script"
_STRAY_BRACKET_RE = re.compile(
    r"<(?!/?(?:" + "|".join(sorted(ALLOWED_TAGS, key=len, reverse=True)) + r")\b[^<>]*>)"
)
_SCHEME_NOISE_RE = re.compile(r"[\s\x00-\x1f]+")


def _is_dangerous_url(value: str) -> bool:
    # value must already be entity-decoded
    compact = _SCHEME_NOISE_RE.sub("", value).lower()
    return compact.startswith(("javascript:", "vbscript:", "data:text/html"))


def _clean_attributes(raw: str) -> str:
    kept = []
    for match in _ATTR_RE.finditer(raw):
        name = match.group(1).lower()
        value = match.group(2)
        if name.startswith("on") or name not in ALLOWED_ATTRIBUTES:
            continue
        if value is None:
            kept.append(name)
            continue
        decoded = html.unescape(value[1:-1] if value[0] in "\"'" else value)
        if name in URL_ATTRIBUTES and _is_dangerous_url(decoded):
            continue
        kept.append(f'{name}="{html.escape(decoded, quote=True)}"')
    return (" " + " ".join(kept)) if kept else ""


def _rewrite_tag(match: "re.Match[str]") -> str:
    closing, tag, attrs = match.group(1), match.group(2).lower(), match.group(3)
    if tag not in ALLOWED_TAGS:
        return ""
    if closing:
        return f"</{tag}>"
    self_closing = attrs.rstrip().endswith("/")
    if self_closing:
        attrs = attrs.rstrip()[:-1]
    return f"<{tag}{_clean_attributes(attrs)}{' /' if self_closing else ''}>"


def sanitize_translation(text: Optional[str]) -> str:
    """Return ``text`` with active content removed.

    - script, style, iframe and object blocks are dropped with their content
    - tags outside ``ALLOWED_TAGS`` are stripped, their text is kept
    - event-handler attributes and ``javascript:`` URLs are dropped
    - control characters are removed and whitespace is collapsed
    """
    if not text or not isinstance(text, str):
        return ""

    sanitized = _BLOCK_RE.sub("", text)
    sanitized = _COMMENT_RE.sub("", sanitized)
    sanitized = _TAG_RE.sub(_rewrite_tag, sanitized)
    sanitized = _STRAY_BRACKET_RE.sub("&lt;", sanitized)
    sanitized = _CONTROL_RE.sub("", sanitized)
    return _WHITESPACE_RE.sub(" ", sanitized).strip()
