"""RGBA canvas helpers: creation, compositing, borders and per-pixel transforms."""

from __future__ import annotations

from typing import Callable

import numpy as np
import numpy.typing as npt
from PIL import Image, ImageDraw

from .models import TRANSPARENT, Rect, Rgba

UInt8Array = npt.NDArray[np.uint8]
PixelTransform = Callable[[UInt8Array], UInt8Array]


def new_canvas(width: int, height: int, fill: Rgba = TRANSPARENT) -> Image.Image:
    if width <= 0 or height <= 0:
        raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
    return Image.new("RGBA", (width, height), fill)


def paste(dst: Image.Image, src: Image.Image, position: tuple[int, int] = (0, 0)) -> None:
    """Alpha-composite ``src`` over ``dst`` in place.

    Pixels falling past the right or bottom edge of ``dst`` are clipped.
    """
    if src.mode != "RGBA":
        src = src.convert("RGBA")
    x, y = int(position[0]), int(position[1])
    if x < 0 or y < 0:
        raise ValueError(f"Paste position must be non-negative, got {(x, y)}")
    if x >= dst.width or y >= dst.height:
        return
    dst.alpha_composite(src, dest=(x, y))


def draw_border(image: Image.Image, rect: Rect, color: Rgba, thickness: int) -> None:
    """Draw a border of ``thickness`` px along the inside of ``rect``.

    ``rect`` is ``(x1, y1, x2, y2)`` with exclusive ``x2``/``y2``; the border
    consumes interior space and never extends outward.
    """
    x1, y1, x2, y2 = rect
    if thickness <= 0 or x2 <= x1 or y2 <= y1:
        return
    tx = min(thickness, x2 - x1)
    ty = min(thickness, y2 - y1)
    draw = ImageDraw.Draw(image)
    # ImageDraw rectangles are inclusive on both ends
    draw.rectangle((x1, y1, x2 - 1, y1 + ty - 1), fill=color)
    draw.rectangle((x1, y2 - ty, x2 - 1, y2 - 1), fill=color)
    draw.rectangle((x1, y1, x1 + tx - 1, y2 - 1), fill=color)
    draw.rectangle((x2 - tx, y1, x2 - 1, y2 - 1), fill=color)


def map_pixels(image: Image.Image, fn: PixelTransform) -> None:
    """Apply ``fn`` to the ``(H, W, 4)`` pixel array of an RGBA image in place."""
    if image.mode != "RGBA":
        raise ValueError(f"map_pixels requires an RGBA image, got {image.mode}")
    image.load()
    arr: UInt8Array = np.array(image, dtype=np.uint8)
    out = np.ascontiguousarray(fn(arr), dtype=np.uint8)
    if out.shape != arr.shape:
        raise ValueError(f"Pixel transform changed shape {arr.shape} -> {out.shape}")
    image.frombytes(out.tobytes())


def alpha_threshold(cutoff: int) -> PixelTransform:
    """Alpha at or below ``cutoff`` becomes 0, everything else 255."""

    def _apply(px: UInt8Array) -> UInt8Array:
        px[..., 3] = np.where(px[..., 3] <= cutoff, 0, 255).astype(np.uint8)
        return px

    return _apply


def recolor(color: Rgba) -> PixelTransform:
    """Replace the RGB of every non-transparent pixel, keeping its alpha."""

    def _apply(px: UInt8Array) -> UInt8Array:
        visible = np.any(px != np.array(TRANSPARENT, dtype=np.uint8), axis=-1)
        px[..., 0][visible] = color[0]
        px[..., 1][visible] = color[1]
        px[..., 2][visible] = color[2]
        return px

    return _apply


def desaturate(factor: float) -> PixelTransform:
    """Blend each channel ``factor`` of the way toward the pixel's luma.

    Luma is approximated as ``0.3R + 0.6G + 0.1B``; results are floored and
    clamped to the 0..255 range. Alpha is untouched.
    """

    def _apply(px: UInt8Array) -> UInt8Array:
        rgb = px[..., :3].astype(np.float32)
        luma = 0.3 * rgb[..., 0] + 0.6 * rgb[..., 1] + 0.1 * rgb[..., 2]
        blended = np.floor(rgb + np.float32(factor) * (luma[..., None] - rgb))
        px[..., :3] = np.clip(blended, 0.0, 255.0).astype(np.uint8)
        return px

    return _apply
