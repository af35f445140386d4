"""Board composition: background plus an evenly spaced grid of tiles."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from PIL import Image

from .canvas import new_canvas, paste
from .models import Board, TileRenderOptions
from .tile import TileRenderer

log = logging.getLogger("tileboard.renderer")


class BoardGeometryError(ValueError):
    pass


def grid_padding(board: Board) -> tuple[int, int]:
    """Per-gap ``(x_pad, y_pad)``; the division remainder is left as trailing space."""
    x1, y1, x2, y2 = board.content_rect
    content_width = x2 - x1
    content_height = y2 - y1
    tiles_width = board.cols * board.tile_size
    tiles_height = board.rows * board.tile_size
    if x1 >= x2 or y1 >= y2:
        raise BoardGeometryError(f"malformed content rectangle {board.content_rect}")
    if tiles_width > content_width or tiles_height > content_height:
        raise BoardGeometryError(
            f"{board.rows}x{board.cols} tiles of {board.tile_size}px do not fit "
            f"content rectangle {board.content_rect}"
        )
    return (content_width - tiles_width) // board.cols, (content_height - tiles_height) // board.rows


def tile_origins(board: Board) -> list[tuple[int, int]]:
    """Top-left corner of every tile slot, row-major."""
    x1, y1, _, _ = board.content_rect
    x_pad, y_pad = grid_padding(board)
    origins = []
    y = y1
    for _ in range(board.rows):
        x = x1
        for _ in range(board.cols):
            origins.append((x, y))
            x += board.tile_size + x_pad
        y += board.tile_size + y_pad
    return origins


class BoardRenderer:
    def __init__(self, tile_renderer: TileRenderer | None = None, workers: int = 1) -> None:
        self.tile_renderer = tile_renderer or TileRenderer()
        self.workers = max(1, int(workers))
        self._renderers: dict[TileRenderOptions, TileRenderer] = {self.tile_renderer.options: self.tile_renderer}

    def _renderer_for(self, board: Board) -> TileRenderer:
        options = board.tile_render_options or self.tile_renderer.options
        if options.tile_size != board.tile_size:
            options = replace(options, tile_size=board.tile_size)
        renderer = self._renderers.get(options)
        if renderer is None:
            renderer = TileRenderer(text_renderer=self.tile_renderer.text_renderer, options=options)
            self._renderers[options] = renderer
        return renderer

    def render(self, board: Board) -> Image.Image:
        if len(board.tiles) != board.rows * board.cols:
            raise BoardGeometryError(f"expected {board.rows * board.cols} tiles, got {len(board.tiles)}")
        origins = tile_origins(board)

        width, height = board.dimensions
        image = new_canvas(width, height)
        paste(image, board.image, (0, 0))

        renderer = self._renderer_for(board)
        started = time.perf_counter()
        if self.workers > 1 and len(board.tiles) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                tile_images = list(pool.map(renderer.render, board.tiles))
        else:
            tile_images = [renderer.render(tile) for tile in board.tiles]

        for origin, tile_image in zip(origins, tile_images):
            paste(image, tile_image, origin)

        elapsed = time.perf_counter() - started
        log.info(
            "rendered %dx%d board in %.3fs",
            board.rows,
            board.cols,
            elapsed,
            extra={
                "event": "board_rendered",
                "tiles": len(board.tiles),
                "unlocked": sum(1 for t in board.tiles if t.unlocked),
                "workers": self.workers,
                "elapsed_s": round(elapsed, 3),
            },
        )
        return image


def render_board(board: Board, tile_renderer: TileRenderer | None = None, workers: int = 1) -> Image.Image:
    return BoardRenderer(tile_renderer=tile_renderer, workers=workers).render(board)
