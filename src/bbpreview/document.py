"""Preview document assembly.

Wraps a converted fragment into a standalone HTML page.  The fragment is
inserted verbatim; this module never escapes or parses it again.
"""

from __future__ import annotations

from bbpreview.converter import escape_html
from bbpreview.themes import ThemeManager, ThemeTokens

# No script sources at all; inline styles and remote images/embeds only.
CONTENT_SECURITY_POLICY = (
    "default-src 'none'; "
    "script-src 'none'; "
    "style-src 'unsafe-inline'; "
    "img-src https: http: data:; "
    "frame-src https://www.youtube.com"
)

DEFAULT_TITLE = "BBCode Preview"

_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <meta http-equiv="Content-Security-Policy" content="{csp}" />
    <title>{title}</title>
    <style>
      :root {{
        color-scheme: light dark;
      }}
      body {{
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', system-ui, sans-serif;
        margin: 0;
        padding: 16px;
        line-height: 1.5;
        background: {background};
        color: {foreground};
      }}
      a {{ color: {link}; }}
      pre {{
        background: {selection};
        padding: 12px;
        border-radius: 6px;
        overflow: auto;
      }}
      blockquote {{
        border-left: 3px solid {foreground};
        padding-left: 12px;
        margin-left: 0;
        opacity: 0.9;
      }}
      img {{
        max-width: 100%;
        height: auto;
      }}
      .container {{
        white-space: pre-wrap;
        word-wrap: break-word;
      }}
    </style>
  </head>
  <body>
    <div class="container">{fragment}</div>
  </body>
</html>
"""


def assemble(
    fragment: str,
    theme: ThemeTokens | str = ThemeManager.DEFAULT,
    *,
    title: str = DEFAULT_TITLE,
) -> str:
    """Embed *fragment* into a complete preview document.

    Args:
        fragment: HTML produced by :func:`bbpreview.converter.convert`.
        theme: Theme tokens, or the name of a preset.
        title: Document title; plain text.

    Returns:
        The full HTML document as a string.

    Raises:
        ValueError: If *theme* names an unknown preset.
    """
    tokens = ThemeManager.resolve(theme)
    return _TEMPLATE.format(
        csp=CONTENT_SECURITY_POLICY,
        title=escape_html(title),
        foreground=tokens.foreground,
        background=tokens.background,
        link=tokens.link,
        selection=tokens.selection,
        fragment=fragment,
    )
