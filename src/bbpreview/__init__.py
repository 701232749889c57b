"""bbpreview - render BBCode as sandboxed HTML previews."""

__version__ = "0.1.0"

from bbpreview.converter import convert, escape_html  # noqa: E402
from bbpreview.document import assemble  # noqa: E402

__all__ = ["__version__", "assemble", "convert", "escape_html"]
