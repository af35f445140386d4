"""Tile template and tile content composition."""

from __future__ import annotations

import logging

from PIL import Image

from .canvas import desaturate, draw_border, map_pixels, new_canvas, paste
from .models import Rect, TextRenderOptions, Tile, TileRenderOptions, TileTheme
from .text import TextRenderer

LOCKED_DESATURATION = 0.9

log = logging.getLogger("tileboard.renderer")


def render_tile_template(size: int, border_size: int, inset_size: int, theme: TileTheme) -> Image.Image:
    image = new_canvas(size, size, theme.background_color)
    draw_border(image, (0, 0, size, size), theme.border_color, border_size)
    draw_border(
        image,
        (border_size, border_size, size - border_size, size - border_size),
        theme.inset_color,
        inset_size,
    )
    return image


def compute_content_bounds(tile_size: int, options: TileRenderOptions) -> Rect:
    offset = options.border_size + options.inset_size + options.padding
    return (offset, offset, tile_size - offset, tile_size - offset)


def fit_icon(image: Image.Image, width: int, height: int) -> Image.Image:
    """Scale ``image`` down to fit ``width`` x ``height``, keeping its aspect ratio.

    Images that already fit are returned as an untouched copy; nothing is ever
    upscaled.
    """
    if image.width <= width and image.height <= height:
        return image.copy()

    content_aspect_ratio = width / height
    image_aspect_ratio = image.width / image.height
    if image_aspect_ratio > content_aspect_ratio:
        # relatively wider than the box: width binds
        scale_factor = width / image.width
    else:
        scale_factor = height / image.height
    new_width = max(1, int(scale_factor * image.width))
    new_height = max(1, int(scale_factor * image.height))
    return image.resize((new_width, new_height), Image.Resampling.BICUBIC)


class TileRenderer:
    """Composes tile images from a shared pair of pre-rendered templates."""

    def __init__(
        self,
        text_renderer: TextRenderer | None = None,
        options: TileRenderOptions | None = None,
    ) -> None:
        self.text_renderer = text_renderer or TextRenderer()
        self.options = options or TileRenderOptions()
        self._locked_template = self._template(self.options.locked_theme)
        self._unlocked_template = self._template(self.options.unlocked_theme)

    def _template(self, theme: TileTheme) -> Image.Image:
        opts = self.options
        return render_tile_template(opts.tile_size, opts.border_size, opts.inset_size, theme)

    def template_for(self, unlocked: bool) -> Image.Image:
        return (self._unlocked_template if unlocked else self._locked_template).copy()

    def render(self, tile: Tile) -> Image.Image:
        opts = self.options
        theme = opts.theme_for(tile.unlocked)
        image = self.template_for(tile.unlocked)
        x1, y1, x2, y2 = compute_content_bounds(opts.tile_size, opts)

        text_options = TextRenderOptions(size=opts.text_size, color=theme.text_color, pixelation=opts.pixelation)
        number_text = self.text_renderer.render(str(tile.number), text_options)
        name_text = self.text_renderer.render(tile.name, text_options)

        paste(image, number_text, (x1, y1))
        content_width = x2 - x1
        # an overlong name starts at the left edge and is clipped by the tile
        x_offset = (content_width - name_text.width) // 2 if name_text.width < content_width else 0
        paste(image, name_text, (x1 + x_offset, max(0, y2 - name_text.height)))

        # keep the icon clear of both labels
        y1 += number_text.height + opts.padding
        y2 -= name_text.height + opts.padding
        content_height = y2 - y1
        if content_width <= 0 or content_height <= 0:
            log.warning(
                "no room for icon on tile %s (%dx%d content box)",
                tile.number,
                content_width,
                content_height,
                extra={"event": "tile_icon_skipped", "tile": tile.number, "unlocked": tile.unlocked},
            )
            return image

        icon = fit_icon(tile.image.convert("RGBA"), content_width, content_height)
        if not tile.unlocked:
            map_pixels(icon, desaturate(LOCKED_DESATURATION))

        x_pad = (content_width - icon.width) // 2
        y_pad = (content_height - icon.height) // 2
        paste(image, icon, (x1 + x_pad, y1 + y_pad))
        return image


def render_tile(
    tile: Tile,
    options: TileRenderOptions | None = None,
    text_renderer: TextRenderer | None = None,
) -> Image.Image:
    return TileRenderer(text_renderer=text_renderer, options=options).render(tile)
