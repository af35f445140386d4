"""Built-in tile theme presets."""

from __future__ import annotations

from .models import TileTheme

DEFAULT_BORDER_COLOR = "#000000"
DEFAULT_INSET_COLOR = "#5A5245"
DEFAULT_BACKGROUND_LOCKED_COLOR = "#3E3529"
DEFAULT_BACKGROUND_UNLOCKED_COLOR = "#2C4A26"
YELLOW = "#FFFF00"
ORANGE = "#FF9000"
GREEN = "#00FF1C"

DEFAULT_THEME_NAME = "Classic"

DEFAULT_LOCKED_THEME = TileTheme.from_hex(
    border=DEFAULT_BORDER_COLOR,
    inset=DEFAULT_INSET_COLOR,
    background=DEFAULT_BACKGROUND_LOCKED_COLOR,
    text=ORANGE,
)
DEFAULT_UNLOCKED_THEME = TileTheme.from_hex(
    border=DEFAULT_BORDER_COLOR,
    inset=DEFAULT_INSET_COLOR,
    background=DEFAULT_BACKGROUND_UNLOCKED_COLOR,
    text=GREEN,
)

# name -> (locked, unlocked)
THEMES: dict[str, tuple[TileTheme, TileTheme]] = {
    "Classic": (DEFAULT_LOCKED_THEME, DEFAULT_UNLOCKED_THEME),
    "Parchment": (
        TileTheme.from_hex(border="#2B1D0E", inset="#8C6A3F", background="#6E5A3C", text=YELLOW),
        TileTheme.from_hex(border="#2B1D0E", inset="#C9A86A", background="#A88B55", text="#FFFFFF"),
    ),
    "Neon Slate": (
        TileTheme.from_hex(border="#0A0F1D", inset="#1A253F", background="#131B33", text="#A9B5D1"),
        TileTheme.from_hex(border="#0A0F1D", inset="#35D9FF", background="#1A253F", text="#8CFFB5"),
    ),
}


def list_themes() -> list[str]:
    return sorted(THEMES.keys())


def get_theme(name: str | None) -> tuple[TileTheme, TileTheme]:
    if not name:
        return THEMES[DEFAULT_THEME_NAME]
    return THEMES.get(name, THEMES[DEFAULT_THEME_NAME])
