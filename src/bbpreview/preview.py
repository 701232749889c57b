"""Preview orchestration.

Ties the converter and the document assembler together for text and
files, and keeps a rendered preview in sync with a source file for as
long as a :class:`PreviewSession` is open.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Optional

from bbpreview.converter import convert
from bbpreview.document import assemble
from bbpreview.themes import ThemeManager

logger = logging.getLogger(__name__)

BBCODE_SUFFIXES = (".bbcode", ".bb")


def is_bbcode_file(path: str | Path) -> bool:
    """Return ``True`` if *path* looks like a BBCode source file."""
    return Path(path).suffix.lower() in BBCODE_SUFFIXES


class Previewer:
    """Render BBCode into preview documents.

    Usage::

        previewer = Previewer(theme="system")
        previewer.render_file("notes.bbcode", "notes.html")

        # or from string
        html = previewer.render_text("[b]Hello[/b]")
    """

    THEMES = ThemeManager.PRESETS

    def __init__(self, theme: str = ThemeManager.DEFAULT) -> None:
        self.theme_manager = ThemeManager(theme)

    def render_text(self, text: str, *, fragment_only: bool = False) -> str:
        """Convert BBCode text to HTML.

        Args:
            text: BBCode source string.
            fragment_only: Return the bare fragment instead of a full document.

        Returns:
            The HTML fragment or document.
        """
        fragment = convert(text)
        if fragment_only:
            return fragment
        return assemble(fragment, self.theme_manager.tokens)

    def render_file(
        self,
        input_path: str | Path,
        output_path: str | Path,
        *,
        encoding: str = "utf-8",
        fragment_only: bool = False,
    ) -> Path:
        """Read a BBCode file and write the HTML output.

        Args:
            input_path: Path to the BBCode source.
            output_path: Path for the ``.html`` output.
            encoding: Text encoding of the source file.
            fragment_only: Write the bare fragment instead of a full document.

        Returns:
            The output path.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)

        source = input_path.read_text(encoding=encoding)
        html = self.render_text(source, fragment_only=fragment_only)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        return output_path


class PreviewSession:
    """Keep an HTML preview in sync with a BBCode source file.

    The change subscription is acquired on ``__enter__`` and released on
    ``__exit__``, whatever happens in between::

        with PreviewSession("notes.bbcode", "notes.html") as session:
            session.watch()
    """

    def __init__(
        self,
        source: str | Path,
        output: str | Path,
        *,
        previewer: Optional[Previewer] = None,
        encoding: str = "utf-8",
        fragment_only: bool = False,
        on_render: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.source = Path(source)
        self.output = Path(output)
        self.previewer = previewer or Previewer()
        self.encoding = encoding
        self.fragment_only = fragment_only
        self.on_render = on_render
        self.render_count = 0
        self._stop: Optional[threading.Event] = None

    # -- lifecycle -----------------------------------------------------------

    def __enter__(self) -> PreviewSession:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._stop is not None and not self._stop.is_set()

    def open(self) -> None:
        """Render once and start accepting change notifications."""
        if self.is_open:
            return
        self._stop = threading.Event()
        logger.debug("Opened preview session for %s", self.source)
        self.render()

    def close(self) -> None:
        """Release the change subscription.  Safe to call more than once."""
        if self._stop is not None and not self._stop.is_set():
            self._stop.set()
            logger.debug("Closed preview session for %s", self.source)

    # -- rendering -----------------------------------------------------------

    def render(self) -> Path:
        """Render the source file to the output path."""
        path = self.previewer.render_file(
            self.source,
            self.output,
            encoding=self.encoding,
            fragment_only=self.fragment_only,
        )
        self.render_count += 1
        logger.info("Rendered %s -> %s", self.source, path)
        if self.on_render is not None:
            self.on_render(path)
        return path

    def watch(self, changes: Optional[Iterable[set[tuple[Any, str]]]] = None) -> None:
        """Re-render on every change batch that touches the source file.

        Args:
            changes: Batches of ``(change, path)`` pairs.  Defaults to a
                :func:`watchfiles.watch` feed on the source's directory,
                which ends when the session is closed.

        Raises:
            RuntimeError: If the session is not open.
        """
        if not self.is_open:
            raise RuntimeError("Preview session is closed")
        if changes is None:
            changes = self._watch_source()

        target = self.source.resolve()
        for batch in changes:
            if not self.is_open:
                break
            if any(Path(p).resolve() == target for _, p in batch):
                self.render()

    def _watch_source(self) -> Iterable[set[tuple[Any, str]]]:
        # Watch the directory: editors often save by replacing the file.
        from watchfiles import watch

        return watch(self.source.resolve().parent, stop_event=self._stop)
