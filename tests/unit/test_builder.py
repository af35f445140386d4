import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from PIL import Image

from tileboard_core.builder import (
    BoardBuilder,
    ContentRect,
    TileBuilder,
    load_board_file,
    parse_tile_render_options,
    validate_content_rect,
)
from tileboard_core.errors import (
    BoardFileError,
    InvalidDimensionsError,
    UnexpectedTilesError,
    WrongNumberOfTilesError,
)
from tileboard_core.images import ImageLoader, ImageLoaderOptions


def _raw(numbers=(1, 2, 3, 4), rows=2, cols=2):
    return {
        "rows": rows,
        "cols": cols,
        "content_rect": {"x1": 0, "y1": 0, "x2": 200, "y2": 200},
        "tile_size": 50,
        "image": "background.png",
        "tiles": [{"number": n, "name": f"Tile {n}", "image": f"icon{n}.png", "unlocked": n == 1} for n in numbers],
    }


class ValidationTests(unittest.TestCase):
    def test_valid_board(self):
        BoardBuilder.from_dict(_raw()).validate((200, 200))

    def test_wrong_tile_count(self):
        with self.assertRaises(WrongNumberOfTilesError) as ctx:
            BoardBuilder.from_dict(_raw(numbers=(1, 2, 3))).validate()
        self.assertEqual((ctx.exception.expected, ctx.exception.actual), (4, 3))

    def test_duplicate_numbers(self):
        with self.assertRaises(UnexpectedTilesError) as ctx:
            BoardBuilder.from_dict(_raw(numbers=(1, 1, 2, 3))).validate()
        self.assertEqual(ctx.exception.numbers, {1})

    def test_numbers_out_of_range(self):
        with self.assertRaises(UnexpectedTilesError) as ctx:
            BoardBuilder.from_dict(_raw(numbers=(1, 2, 3, 9))).validate()
        self.assertEqual(ctx.exception.numbers, {9})

    def test_inverted_rect(self):
        with self.assertRaises(InvalidDimensionsError):
            validate_content_rect((200, 200), ContentRect(100, 0, 50, 200), 10, 1, 1)

    def test_rect_outside_image(self):
        with self.assertRaises(InvalidDimensionsError):
            validate_content_rect((200, 200), ContentRect(50, 0, 250, 200), 10, 1, 1)

    def test_grid_too_large(self):
        with self.assertRaises(InvalidDimensionsError):
            validate_content_rect((200, 200), ContentRect(0, 0, 200, 120), 50, 3, 2)

    def test_malformed_description(self):
        raw = _raw()
        del raw["rows"]
        with self.assertRaises(BoardFileError):
            BoardBuilder.from_dict(raw)

    def test_content_rect_list_form(self):
        raw = _raw()
        raw["content_rect"] = [1, 2, 199, 198]
        self.assertEqual(BoardBuilder.from_dict(raw).content_rect, ContentRect(1, 2, 199, 198))


class OptionsTests(unittest.TestCase):
    def test_theme_overrides(self):
        options = parse_tile_render_options(
            {"padding": 3, "theme": "Parchment", "locked_theme": {"text_color": "#112233"}},
            tile_size=64,
        )
        self.assertEqual(options.tile_size, 64)
        self.assertEqual(options.padding, 3)
        self.assertEqual(options.locked_theme.text_color, (0x11, 0x22, 0x33, 255))
        self.assertEqual(options.unlocked_theme.text_color, (255, 255, 255, 255))

    def test_unknown_theme_key_is_rejected(self):
        raw = _raw()
        raw["tile_render_options"] = {"locked_theme": {"glow": "#fff"}}
        with self.assertRaises(BoardFileError):
            BoardBuilder.from_dict(raw)


class BuildTests(unittest.TestCase):
    def test_yaml_board_builds_sorted_tiles(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            Image.new("RGBA", (200, 200), (255, 255, 255, 255)).save(root / "background.png")
            for n in range(1, 5):
                Image.new("RGBA", (8, 8), (n * 40, 0, 0, 255)).save(root / f"icon{n}.png")
            lines = [
                "rows: 2",
                "cols: 2",
                "content_rect: {x1: 0, y1: 0, x2: 200, y2: 200}",
                "tile_size: 50",
                "image: background.png",
                "tiles:",
            ]
            for n in (3, 1, 4, 2):
                lines.append(f"  - {{number: {n}, name: 'Tile {n}', image: icon{n}.png, unlocked: {str(n == 2).lower()}}}")
            (root / "board.yaml").write_text("\n".join(lines) + "\n", encoding="utf-8")

            builder = load_board_file(root / "board.yaml")
            self.assertEqual(Path(builder.image), (root / "background.png").resolve())
            loader = ImageLoader(ImageLoaderOptions(cache_dir=root / "cache"))
            board = builder.build(loader)

            self.assertEqual([t.number for t in board.tiles], [1, 2, 3, 4])
            self.assertEqual([t.unlocked for t in board.tiles], [False, True, False, False])
            self.assertEqual(board.tiles[2].image.getpixel((0, 0)), (120, 0, 0, 255))
            self.assertEqual(board.content_rect, (0, 0, 200, 200))
            self.assertEqual(board.image.size, (200, 200))
            self.assertEqual(board.tile_render_options.tile_size, 50)

    def test_json_board_validates_background(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            Image.new("RGBA", (150, 150)).save(root / "background.png")
            (root / "board.json").write_text(json.dumps(_raw()), encoding="utf-8")
            builder = load_board_file(root / "board.json")
            loader = ImageLoader(ImageLoaderOptions(cache_dir=root / "cache"))
            with self.assertRaises(InvalidDimensionsError):
                builder.build(loader)

    def test_unreadable_board_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "board.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertRaises(BoardFileError):
                load_board_file(path)
            with self.assertRaises(BoardFileError):
                load_board_file(Path(tmp) / "missing.yaml")

    def test_builder_direct_construction(self):
        builder = BoardBuilder(
            rows=1,
            cols=1,
            content_rect=ContentRect(0, 0, 10, 10),
            tile_size=10,
            image="bg.png",
            tiles=[TileBuilder(number=1, name="Only", image="x.png")],
        )
        builder.validate((10, 10))


if __name__ == "__main__":
    unittest.main()
