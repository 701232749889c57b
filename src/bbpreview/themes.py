"""Theme token presets for the preview document.

A theme never carries a palette of its own.  Each token is a CSS value
that points at colours the host already provides (custom properties or
CSS system colours), so the preview follows the host's light/dark mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields

# Characters that would let a token escape its declaration or the <style> block.
_UNSAFE_TOKEN_RE = re.compile(r"[<>{};]")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ThemeTokens:
    """CSS values for the four colours the preview styles depend on."""

    foreground: str
    background: str
    link: str
    selection: str

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not value.strip() or _UNSAFE_TOKEN_RE.search(value):
                raise ValueError(f"Invalid theme token {f.name}={value!r}")

    @classmethod
    def from_prefix(cls, prefix: str, fallback: ThemeTokens | None = None) -> ThemeTokens:
        """Build tokens that read ``var(<prefix>-foreground)`` and friends."""
        def token(name: str) -> str:
            if fallback is None:
                return f"var({prefix}-{name})"
            return f"var({prefix}-{name}, {getattr(fallback, name)})"

        return cls(
            foreground=token("foreground"),
            background=token("background"),
            link=token("link"),
            selection=token("selection"),
        )


# ---------------------------------------------------------------------------
# Preset definitions
# ---------------------------------------------------------------------------

def _build_vscode_theme() -> ThemeTokens:
    return ThemeTokens(
        foreground="var(--vscode-editor-foreground)",
        background="var(--vscode-editor-background)",
        link="var(--vscode-textLink-foreground)",
        selection="var(--vscode-editor-inactiveSelectionBackground)",
    )


def _build_system_theme() -> ThemeTokens:
    return ThemeTokens(
        foreground="CanvasText",
        background="Canvas",
        link="LinkText",
        selection="Highlight",
    )


def _build_custom_properties_theme() -> ThemeTokens:
    return ThemeTokens.from_prefix("--bbpreview", fallback=_build_system_theme())


_PRESET_BUILDERS = {
    "vscode": _build_vscode_theme,
    "system": _build_system_theme,
    "custom-properties": _build_custom_properties_theme,
}


# ---------------------------------------------------------------------------
# ThemeManager
# ---------------------------------------------------------------------------

class ThemeManager:
    """Resolve theme presets by name.

    Usage::

        tm = ThemeManager("system")
        tokens = tm.tokens
    """

    PRESETS = list(_PRESET_BUILDERS.keys())
    DEFAULT = "vscode"

    def __init__(self, preset: str = DEFAULT) -> None:
        if preset not in _PRESET_BUILDERS:
            raise ValueError(
                f"Unknown theme {preset!r}. Choose from: {', '.join(_PRESET_BUILDERS)}"
            )
        self.preset = preset
        self.tokens = _PRESET_BUILDERS[preset]()

    @classmethod
    def resolve(cls, theme: ThemeTokens | str) -> ThemeTokens:
        """Return *theme* itself, or the tokens of the preset it names."""
        if isinstance(theme, ThemeTokens):
            return theme
        return cls(theme).tokens
