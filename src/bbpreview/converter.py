"""BBCode to HTML fragment conversion.

The source text is HTML-escaped once, up front, and then rewritten by a
fixed sequence of global passes, one per tag family (see
:mod:`bbpreview.rules`).  Passes only ever look for bracket syntax, and
the HTML they emit never contains any, so a later pass cannot mistake
earlier output for fresh markup.  Tags that do not match a rule are left
in place as escaped literal text; :func:`convert` never raises.
"""

from __future__ import annotations

import logging
import re

from bbpreview import rules

logger = logging.getLogger(__name__)

_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    # Browsers replace NUL anyway; doing it here keeps the shelf markers unique.
    "\x00": "\ufffd",
})

_SHELF_MARK = "\x00{}\x00"
_SHELF_RE = re.compile("\x00([0-9]+)\x00")

_CONTROL_OR_SPACE_RE = re.compile(r"[\x00-\x20\x7f]+")


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` to their entity forms."""
    return text.translate(_ESCAPES)


def is_safe_url(value: str) -> bool:
    """Return ``False`` for destinations that could run script."""
    compact = _CONTROL_OR_SPACE_RE.sub("", value).lower()
    return not compact.startswith(rules.BLOCKED_SCHEMES)


def convert(source: str) -> str:
    """Convert BBCode *source* into an HTML fragment.

    Args:
        source: BBCode markup.  Any string is accepted.

    Returns:
        An HTML fragment built only from the whitelisted elements, with
        every piece of literal text escaped exactly once.
    """
    shelf: list[str] = []

    html = escape_html(source)
    html = _convert_simple_tags(html)
    html = _convert_named_quotes(html)
    html = _convert_alignment(html)
    html = _convert_size(html)
    html = _convert_color(html)
    html = _convert_style(html)
    html = _convert_code(html, shelf)
    html = _convert_links(html)
    html = _convert_images(html)
    html = _convert_spoilers(html)
    html = _convert_lists(html)
    html = _convert_tables(html)
    html = _convert_embeds(html)

    return _unshelve(html, shelf)


# ---------------------------------------------------------------------------
# Direct substitutions
# ---------------------------------------------------------------------------

def _wrap_all(html: str, table) -> str:
    for rule, pattern in table:
        open_tag, close_tag = rule.open_tag(), rule.close_tag()
        html = pattern.sub(lambda m: f"{open_tag}{m.group(1)}{close_tag}", html)
    return html


def _convert_simple_tags(html: str) -> str:
    return _wrap_all(html, rules.SIMPLE_PATTERNS)


def _convert_named_quotes(html: str) -> str:
    return rules.NAMED_QUOTE_RE.sub(
        lambda m: f"<blockquote><cite>{m.group(1)}</cite>{m.group(2)}</blockquote>",
        html,
    )


def _convert_alignment(html: str) -> str:
    return _wrap_all(html, rules.ALIGN_PATTERNS)


def _convert_tables(html: str) -> str:
    return _wrap_all(html, rules.TABLE_PATTERNS)


def _convert_spoilers(html: str) -> str:
    return rules.SPOILER_RE.sub(
        lambda m: (
            f"<details><summary>{rules.SPOILER_LABEL}</summary>"
            f"<div>{m.group(1)}</div></details>"
        ),
        html,
    )


# ---------------------------------------------------------------------------
# Size / colour / style
# ---------------------------------------------------------------------------

def _convert_size(html: str) -> str:
    return rules.SIZE_RE.sub(
        lambda m: f'<span style="font-size:{m.group(1)}px;">{m.group(2)}</span>',
        html,
    )


def _convert_color(html: str) -> str:
    return rules.COLOR_RE.sub(
        lambda m: f'<span style="color:{m.group(1).strip()};">{m.group(2)}</span>',
        html,
    )


def _style_span(match: re.Match[str]) -> str:
    attrs, body = match.group(1), match.group(2)
    parts: list[str] = []

    size = rules.STYLE_SIZE_RE.search(attrs)
    if size:
        parts.append(f"font-size:{size.group(1)}px")
    color = rules.STYLE_COLOR_RE.search(attrs)
    if color and color.group(1).strip():
        parts.append(f"color:{color.group(1).strip()}")

    if not parts:
        return body
    return f'<span style="{";".join(parts)};">{body}</span>'


def _convert_style(html: str) -> str:
    return rules.STYLE_RE.sub(_style_span, html)


# ---------------------------------------------------------------------------
# Code blocks
# ---------------------------------------------------------------------------

def _shelve(shelf: list[str], body: str) -> str:
    # A body may hold markers of blocks shelved by an earlier code pass.
    shelf.append(_unshelve(body, shelf))
    return _SHELF_MARK.format(len(shelf) - 1)


def _unshelve(html: str, shelf: list[str]) -> str:
    if not shelf:
        return html
    return _SHELF_RE.sub(lambda m: shelf[int(m.group(1))], html)


def _convert_code(html: str, shelf: list[str]) -> str:
    # Bodies are parked on the shelf so no later pass rewrites them.
    html = rules.CODE_RE.sub(
        lambda m: f"<pre><code>{_shelve(shelf, m.group(1))}</code></pre>",
        html,
    )
    html = rules.CODE_LANG_RE.sub(
        lambda m: (
            f'<pre><code data-lang="{m.group(1)}">'
            f"{_shelve(shelf, m.group(2))}</code></pre>"
        ),
        html,
    )
    return rules.PRE_RE.sub(
        lambda m: f"<pre>{_shelve(shelf, m.group(1))}</pre>",
        html,
    )


# ---------------------------------------------------------------------------
# Links, images, embeds
# ---------------------------------------------------------------------------

def _anchor(href: str, label: str) -> str:
    return f'<a href="{href}" target="_blank" rel="noopener">{label}</a>'


def _labeled_link(match: re.Match[str]) -> str:
    href = match.group(1).strip()
    if not is_safe_url(href):
        return match.group(0)
    return _anchor(href, match.group(2))


def _bare_link(match: re.Match[str]) -> str:
    href = match.group(1).strip()
    if not is_safe_url(href):
        return match.group(0)
    return _anchor(href, href)


def _convert_links(html: str) -> str:
    html = rules.URL_LABELED_RE.sub(_labeled_link, html)
    return rules.URL_BARE_RE.sub(_bare_link, html)


def _image(match: re.Match[str], src: str, width: str = "", height: str = "") -> str:
    src = src.strip()
    if not is_safe_url(src):
        return match.group(0)
    attrs = [f'src="{src}"']
    if width:
        attrs.append(f'width="{width}"')
    if height:
        attrs.append(f'height="{height}"')
    attrs.append(f'alt="{rules.IMAGE_ALT}"')
    return f"<img {' '.join(attrs)} />"


def _convert_images(html: str) -> str:
    html = rules.IMG_BARE_RE.sub(lambda m: _image(m, m.group(1)), html)
    html = rules.IMG_ATTR_RE.sub(
        lambda m: _image(m, m.group(3), m.group(1), m.group(2) or ""), html
    )
    return rules.IMG_DIMS_RE.sub(
        lambda m: _image(m, m.group(3), m.group(1), m.group(2)), html
    )


def _convert_embeds(html: str) -> str:
    return rules.YOUTUBE_RE.sub(
        lambda m: (
            f'<iframe src="{rules.YOUTUBE_EMBED_URL.format(video_id=m.group(1))}" '
            'title="YouTube video" frameborder="0" allowfullscreen></iframe>'
        ),
        html,
    )


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def _list_item(match: re.Match[str]) -> str:
    return f"<li>{match.group(1).strip()}</li>"


def _render_list(match: re.Match[str]) -> str:
    name, marker, body = match.group(1).lower(), match.group(2), match.group(3)

    items = rules.STAR_ITEM_RE.sub(_list_item, body)
    items = rules.LI_ITEM_RE.sub(_list_item, items)

    if marker and marker != "1":
        return f'<ol type="{marker}">{items}</ol>'
    tag = "ol" if name == "ol" or marker else "ul"
    return f"<{tag}>{items}</{tag}>"


def _convert_lists(html: str) -> str:
    # Innermost lists are rewritten first.  Every productive round removes
    # at least one opener, so the opener count bounds the loop.
    budget = len(rules.LIST_OPEN_RE.findall(html))
    rounds = 0
    while rounds < budget:
        html, count = rules.LIST_RE.subn(_render_list, html)
        if not count:
            break
        rounds += 1
    if rounds:
        logger.debug("Converted lists in %d round(s) (%d openers)", rounds, budget)
    return html
