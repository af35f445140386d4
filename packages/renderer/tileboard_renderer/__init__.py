"""Renderer package for tile and board image composition."""

from .board import BoardGeometryError, BoardRenderer, grid_padding, render_board, tile_origins
from .canvas import alpha_threshold, desaturate, draw_border, map_pixels, new_canvas, paste, recolor
from .models import BLACK, TRANSPARENT, Board, TextRenderOptions, Tile, TileRenderOptions, TileTheme, parse_color
from .text import DEFAULT_FONT_SIZE, FontLoadError, TextRenderer, load_font
from .themes import DEFAULT_THEME_NAME, get_theme, list_themes
from .tile import TileRenderer, compute_content_bounds, fit_icon, render_tile, render_tile_template

__all__ = [
    "BLACK",
    "Board",
    "BoardGeometryError",
    "BoardRenderer",
    "DEFAULT_FONT_SIZE",
    "DEFAULT_THEME_NAME",
    "FontLoadError",
    "TRANSPARENT",
    "TextRenderOptions",
    "TextRenderer",
    "Tile",
    "TileRenderOptions",
    "TileRenderer",
    "TileTheme",
    "alpha_threshold",
    "compute_content_bounds",
    "desaturate",
    "draw_border",
    "fit_icon",
    "get_theme",
    "grid_padding",
    "list_themes",
    "load_font",
    "map_pixels",
    "new_canvas",
    "parse_color",
    "paste",
    "recolor",
    "render_board",
    "render_tile",
    "render_tile_template",
    "tile_origins",
]
