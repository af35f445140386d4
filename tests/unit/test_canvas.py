import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from tileboard_renderer.canvas import (
    alpha_threshold,
    desaturate,
    draw_border,
    map_pixels,
    new_canvas,
    paste,
    recolor,
)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


def _luma(px):
    return 0.3 * px[0] + 0.6 * px[1] + 0.1 * px[2]


class CanvasTests(unittest.TestCase):
    def test_new_canvas_fill(self):
        img = new_canvas(4, 3, RED)
        self.assertEqual(img.mode, "RGBA")
        self.assertEqual(img.size, (4, 3))
        self.assertEqual(img.getpixel((3, 2)), RED)

    def test_new_canvas_rejects_empty(self):
        with self.assertRaises(ValueError):
            new_canvas(0, 5)

    def test_paste_opaque(self):
        dst = new_canvas(4, 4, RED)
        paste(dst, new_canvas(2, 2, BLUE), (1, 1))
        self.assertEqual(dst.getpixel((0, 0)), RED)
        self.assertEqual(dst.getpixel((1, 1)), BLUE)
        self.assertEqual(dst.getpixel((2, 2)), BLUE)
        self.assertEqual(dst.getpixel((3, 3)), RED)

    def test_paste_blends_alpha(self):
        dst = new_canvas(1, 1, WHITE)
        paste(dst, new_canvas(1, 1, (0, 0, 255, 128)), (0, 0))
        r, g, b, a = dst.getpixel((0, 0))
        self.assertEqual(a, 255)
        self.assertEqual(b, 255)
        self.assertAlmostEqual(r, 127, delta=1)
        self.assertAlmostEqual(g, 127, delta=1)

    def test_paste_transparent_source_keeps_destination(self):
        dst = new_canvas(2, 2, RED)
        paste(dst, new_canvas(2, 2), (0, 0))
        self.assertEqual(dst.getpixel((1, 1)), RED)

    def test_paste_clips_out_of_bounds(self):
        dst = new_canvas(4, 4, RED)
        paste(dst, new_canvas(3, 3, BLUE), (2, 2))
        self.assertEqual(dst.size, (4, 4))
        self.assertEqual(dst.getpixel((3, 3)), BLUE)
        self.assertEqual(dst.getpixel((1, 1)), RED)
        paste(dst, new_canvas(3, 3, WHITE), (10, 10))
        self.assertEqual(dst.getpixel((3, 3)), BLUE)

    def test_border_is_inset(self):
        img = new_canvas(10, 10, WHITE)
        draw_border(img, (0, 0, 10, 10), RED, 2)
        for xy in [(0, 0), (1, 5), (9, 9), (8, 5), (5, 1), (5, 8)]:
            self.assertEqual(img.getpixel(xy), RED, xy)
        for xy in [(2, 2), (5, 5), (7, 7)]:
            self.assertEqual(img.getpixel(xy), WHITE, xy)

    def test_border_inside_sub_rect(self):
        img = new_canvas(10, 10, WHITE)
        draw_border(img, (2, 2, 8, 8), BLUE, 1)
        self.assertEqual(img.getpixel((2, 2)), BLUE)
        self.assertEqual(img.getpixel((7, 7)), BLUE)
        self.assertEqual(img.getpixel((1, 1)), WHITE)
        self.assertEqual(img.getpixel((8, 8)), WHITE)
        self.assertEqual(img.getpixel((4, 4)), WHITE)

    def test_zero_thickness_border_draws_nothing(self):
        img = new_canvas(4, 4, WHITE)
        draw_border(img, (0, 0, 4, 4), RED, 0)
        self.assertTrue((np.array(img) == np.array(WHITE, dtype=np.uint8)).all())


class PixelTransformTests(unittest.TestCase):
    def test_alpha_threshold(self):
        img = new_canvas(3, 1)
        img.putpixel((0, 0), (0, 0, 0, 0))
        img.putpixel((1, 0), (0, 0, 0, 140))
        img.putpixel((2, 0), (0, 0, 0, 141))
        map_pixels(img, alpha_threshold(140))
        self.assertEqual([img.getpixel((x, 0))[3] for x in range(3)], [0, 0, 255])

    def test_recolor_keeps_alpha_and_transparency(self):
        img = new_canvas(2, 1)
        img.putpixel((1, 0), (0, 0, 0, 100))
        map_pixels(img, recolor((10, 20, 30, 255)))
        self.assertEqual(img.getpixel((0, 0)), (0, 0, 0, 0))
        self.assertEqual(img.getpixel((1, 0)), (10, 20, 30, 100))

    def test_desaturate_red(self):
        img = new_canvas(1, 1, (255, 0, 0, 200))
        map_pixels(img, desaturate(0.9))
        self.assertEqual(img.getpixel((0, 0)), (94, 68, 68, 200))

    def test_desaturate_moves_toward_luma(self):
        samples = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (12, 200, 99), (250, 250, 3), (90, 10, 240)]
        img = new_canvas(len(samples), 1)
        for x, rgb in enumerate(samples):
            img.putpixel((x, 0), rgb + (255,))
        map_pixels(img, desaturate(0.9))
        for x, rgb in enumerate(samples):
            out = img.getpixel((x, 0))
            luma = _luma(rgb)
            for before, after in zip(rgb, out[:3]):
                self.assertTrue(0 <= after <= 255)
                self.assertLessEqual(abs(after - luma), abs(before - luma) + 1)
            self.assertEqual(out[3], 255)

    def test_desaturate_zero_factor_is_identity(self):
        img = new_canvas(1, 1, (12, 200, 99, 255))
        map_pixels(img, desaturate(0.0))
        self.assertEqual(img.getpixel((0, 0)), (12, 200, 99, 255))

    def test_map_pixels_requires_rgba(self):
        from PIL import Image

        with self.assertRaises(ValueError):
            map_pixels(Image.new("RGB", (1, 1)), desaturate(0.5))


if __name__ == "__main__":
    unittest.main()
