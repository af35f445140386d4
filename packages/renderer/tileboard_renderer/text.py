"""Text rasterization with a 1px drop shadow."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Union

from PIL import Image, ImageDraw, ImageFont

from .canvas import alpha_threshold, map_pixels, new_canvas, paste, recolor
from .models import BLACK, TextRenderOptions

DEFAULT_FONT_SIZE = 20

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


class FontLoadError(RuntimeError):
    pass


def load_font(path: str | Path | None = None, size: int = DEFAULT_FONT_SIZE) -> Font:
    """Load a TrueType/OpenType font, or Pillow's built-in font when ``path`` is None."""
    if path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(path), size)
    except OSError as exc:
        raise FontLoadError(f"Unable to load font {path}: {exc}") from exc


class TextRenderer:
    """Renders single-line labels into tightly sized RGBA images.

    The output is one pixel wider and taller than the text's bounding box; that
    extra row/column holds the black shadow offset by (1, 1) under the colored
    foreground.
    """

    def __init__(self, font_path: str | Path | None = None, size: int = DEFAULT_FONT_SIZE) -> None:
        self._init_font(load_font(font_path, size))

    def _init_font(self, font: Font) -> None:
        if not isinstance(font, (ImageFont.FreeTypeFont, ImageFont.ImageFont)):
            raise FontLoadError(f"Expected a Pillow font, got {type(font).__name__}")
        self.font = font
        self._variants: dict[int, Font] = {}
        # FreeType faces are not safe to rasterize from several threads at once
        self._lock = threading.Lock()

    @classmethod
    def from_font(cls, font: Font) -> TextRenderer:
        """Wrap an already loaded font."""
        renderer = cls.__new__(cls)
        renderer._init_font(font)
        return renderer

    def _font_for(self, size: int) -> Font:
        if not isinstance(self.font, ImageFont.FreeTypeFont) or self.font.size == size:
            return self.font
        font = self._variants.get(size)
        if font is None:
            font = self.font.font_variant(size=size)
            self._variants[size] = font
        return font

    def text_bbox(self, text: str, size: int) -> tuple[int, int, int, int]:
        with self._lock:
            return tuple(int(v) for v in self._font_for(size).getbbox(text))  # type: ignore[return-value]

    def render(self, text: str, options: TextRenderOptions) -> Image.Image:
        with self._lock:
            font = self._font_for(options.size)
            left, top, right, bottom = (int(v) for v in font.getbbox(text))
            width = max(right - left, 0) + 1
            height = max(bottom - top, 0) + 1

            # black "stamp" reused for the shadow and, recolored, the foreground
            template = new_canvas(width, height)
            ImageDraw.Draw(template).text((-left, -top), text, font=font, fill=BLACK)

        if options.pixelation is not None:
            map_pixels(template, alpha_threshold(options.pixelation))

        text_image = new_canvas(width, height)
        paste(text_image, template, (1, 1))
        map_pixels(template, recolor(options.color))
        paste(text_image, template, (0, 0))
        return text_image
