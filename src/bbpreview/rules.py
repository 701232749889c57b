"""Static BBCode tag rules.

Every recognised construct is described here as read-only data: plain
``(bb_name, html_name)`` tables for the direct substitutions and compiled
patterns for the attribute-bearing tags.  The converter iterates these in
a fixed order; nothing in this module is mutated at runtime.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_FLAGS = re.IGNORECASE | re.DOTALL


# ---------------------------------------------------------------------------
# Rule descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TagRule:
    """A direct ``[name]...[/name]`` to ``<element>...</element>`` mapping."""

    bb: str
    html: str
    style: str = ""

    @property
    def pattern(self) -> re.Pattern[str]:
        return _pair_pattern(self.bb)

    def open_tag(self) -> str:
        if self.style:
            return f'<{self.html} style="{self.style}">'
        return f"<{self.html}>"

    def close_tag(self) -> str:
        return f"</{self.html}>"


def _pair_pattern(name: str, attr: Optional[str] = None) -> re.Pattern[str]:
    head = re.escape(name) if attr is None else f"{re.escape(name)}{attr}"
    return re.compile(rf"\[{head}\](.*?)\[/{re.escape(name)}\]", _FLAGS)


# ---------------------------------------------------------------------------
# Direct substitution tables
# ---------------------------------------------------------------------------

SIMPLE_TAGS: tuple[TagRule, ...] = (
    TagRule("b", "strong"),
    TagRule("i", "em"),
    TagRule("u", "u"),
    TagRule("s", "s"),
    TagRule("quote", "blockquote"),
)

ALIGN_TAGS: tuple[TagRule, ...] = tuple(
    TagRule(side, "div", style=f"text-align:{side};")
    for side in ("center", "left", "right")
)

TABLE_TAGS: tuple[TagRule, ...] = (
    TagRule("table", "table"),
    TagRule("tr", "tr"),
    TagRule("th", "th"),
    TagRule("td", "td"),
)

SPOILER_LABEL = "Spoiler"
IMAGE_ALT = "BBCode image"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"

# Compiled once so callers never rebuild them per conversion.
SIMPLE_PATTERNS = tuple((rule, rule.pattern) for rule in SIMPLE_TAGS)
ALIGN_PATTERNS = tuple((rule, rule.pattern) for rule in ALIGN_TAGS)
TABLE_PATTERNS = tuple((rule, rule.pattern) for rule in TABLE_TAGS)


# ---------------------------------------------------------------------------
# Attribute value classes
# ---------------------------------------------------------------------------

SIZE_VALUE = r"[0-9]{1,3}"
COLOR_VALUE = r"[#a-zA-Z0-9(),.\s]+"
DIMENSION_VALUE = r"[0-9]{1,4}"

# Values re-emitted inside a quoted attribute.  User text never holds a raw
# quote or angle bracket after escaping, so these only appear when an
# earlier pass already produced markup there; such a tag is left alone.
_ATTR_VALUE = r'=([^\]"<>]+)'
_SOURCE_VALUE = r'([^\]"<>]+)'

NAMED_QUOTE_RE = _pair_pattern("quote", r"=([^\]]+)")
SIZE_RE = _pair_pattern("size", rf"=({SIZE_VALUE})")
COLOR_RE = _pair_pattern("color", rf"=({COLOR_VALUE})")
STYLE_RE = _pair_pattern("style", r"\s+([^\]]+)")

# Sub-fields inside a [style ...] clause.  A colour value ends where the
# next ``name=`` pair begins.
STYLE_SIZE_RE = re.compile(rf"size\s*=\s*({SIZE_VALUE})", re.IGNORECASE)
STYLE_COLOR_RE = re.compile(
    rf"color\s*=\s*({COLOR_VALUE}?)(?=\s+[a-z-]+\s*=|\s*$)", re.IGNORECASE
)


# ---------------------------------------------------------------------------
# Code blocks
# ---------------------------------------------------------------------------

CODE_RE = _pair_pattern("code")
CODE_LANG_RE = _pair_pattern("code", _ATTR_VALUE)
PRE_RE = _pair_pattern("pre")


# ---------------------------------------------------------------------------
# Links, images, embeds
# ---------------------------------------------------------------------------

URL_LABELED_RE = _pair_pattern("url", _ATTR_VALUE)
URL_BARE_RE = re.compile(r'\[url\]([^"<>]*?)\[/url\]', _FLAGS)

IMG_BARE_RE = re.compile(rf"\[img\]{_SOURCE_VALUE}\[/img\]", re.IGNORECASE)
IMG_ATTR_RE = re.compile(
    rf"\[img\s+width=({DIMENSION_VALUE})(?:\s+height=({DIMENSION_VALUE}))?\]"
    rf"{_SOURCE_VALUE}\[/img\]",
    re.IGNORECASE,
)
IMG_DIMS_RE = re.compile(
    rf"\[img=({DIMENSION_VALUE})x({DIMENSION_VALUE})\]{_SOURCE_VALUE}\[/img\]",
    re.IGNORECASE,
)

SPOILER_RE = _pair_pattern("spoiler")
YOUTUBE_RE = re.compile(r"\[youtube\]([a-zA-Z0-9_-]{5,})\[/youtube\]", re.IGNORECASE)

# Schemes that can execute script when followed or loaded.
BLOCKED_SCHEMES: tuple[str, ...] = (
    "javascript:",
    "vbscript:",
    "data:text/html",
    "data:text/javascript",
    "data:application/javascript",
    "data:application/x-javascript",
    "data:image/svg+xml",
)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

_LIST_OPEN = r"\[(?:list(?:=[1aAiI])?|ul|ol)\]"

# Innermost list only: the body may not contain another list opener.
LIST_RE = re.compile(
    rf"\[(list|ul|ol)(?:(?<=list)=([1aAiI]))?\]((?:(?!{_LIST_OPEN}).)*?)\[/\1\]",
    _FLAGS,
)
LIST_OPEN_RE = re.compile(_LIST_OPEN, re.IGNORECASE)

STAR_ITEM_RE = re.compile(r"\[\*\]([^\[]+)")
LI_ITEM_RE = _pair_pattern("li")
