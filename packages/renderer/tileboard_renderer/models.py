"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field

from PIL import Image, ImageColor

Rgba = tuple[int, int, int, int]
Rect = tuple[int, int, int, int]

BLACK: Rgba = (0, 0, 0, 255)
TRANSPARENT: Rgba = (0, 0, 0, 0)


def parse_color(value: str | tuple[int, ...] | list[int]) -> Rgba:
    """Accepts ``#RRGGBB``/``#RRGGBBAA``/CSS names or 3/4-length sequences."""
    if isinstance(value, str):
        return ImageColor.getcolor(value, "RGBA")  # type: ignore[return-value]
    channels = tuple(int(c) for c in value)
    if len(channels) == 3:
        channels = channels + (255,)
    if len(channels) != 4 or not all(0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid RGBA color: {value!r}")
    return channels  # type: ignore[return-value]


@dataclass(frozen=True)
class TileTheme:
    border_color: Rgba
    inset_color: Rgba
    background_color: Rgba
    text_color: Rgba

    @classmethod
    def from_hex(cls, border: str, inset: str, background: str, text: str) -> TileTheme:
        return cls(
            border_color=parse_color(border),
            inset_color=parse_color(inset),
            background_color=parse_color(background),
            text_color=parse_color(text),
        )


@dataclass(frozen=True)
class TextRenderOptions:
    size: int
    color: Rgba
    # alpha cutoff; pixels at or below become transparent, the rest opaque
    pixelation: int | None = None


def _default_locked_theme() -> TileTheme:
    from .themes import DEFAULT_LOCKED_THEME

    return DEFAULT_LOCKED_THEME


def _default_unlocked_theme() -> TileTheme:
    from .themes import DEFAULT_UNLOCKED_THEME

    return DEFAULT_UNLOCKED_THEME


@dataclass(frozen=True)
class TileRenderOptions:
    """Render-time tile configuration.

    ``tile_size`` is the side of the square tile. ``border_size`` and
    ``inset_size`` are the thicknesses of the outer and inner frames, and
    ``padding`` separates the frame, the labels and the icon from each other.
    """

    tile_size: int = 216
    padding: int = 6
    border_size: int = 4
    inset_size: int = 4
    text_size: int = 20
    pixelation: int | None = None
    locked_theme: TileTheme = field(default_factory=_default_locked_theme)
    unlocked_theme: TileTheme = field(default_factory=_default_unlocked_theme)

    def theme_for(self, unlocked: bool) -> TileTheme:
        return self.unlocked_theme if unlocked else self.locked_theme


@dataclass(frozen=True)
class Tile:
    number: int
    name: str
    image: Image.Image
    unlocked: bool = False


@dataclass(frozen=True)
class Board:
    rows: int
    cols: int
    # (x1, y1, x2, y2) of the area the tile grid is drawn in
    content_rect: Rect
    tile_size: int
    image: Image.Image
    tiles: tuple[Tile, ...]
    tile_render_options: TileRenderOptions | None = None

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.image.size
