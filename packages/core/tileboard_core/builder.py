"""Board description parsing and validation.

A board file (JSON, or YAML when the suffix is ``.yaml``/``.yml``) looks like::

    rows: 5
    cols: 5
    content_rect: {x1: 20, y1: 20, x2: 1200, y2: 1200}
    tile_size: 216
    image: background.png
    tile_render_options: {theme: Classic, padding: 6}
    tiles:
      - {number: 1, name: "Serpentine helm", image: "https://...", unlocked: false}

Relative image paths are resolved against the board file's directory.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Iterable

import yaml

from tileboard_renderer.models import Board, Tile, TileRenderOptions, TileTheme, parse_color
from tileboard_renderer.themes import get_theme

from .errors import (
    BoardFileError,
    InvalidDimensionsError,
    MissingTilesError,
    UnexpectedTilesError,
    WrongNumberOfTilesError,
)
from .images import ImageLoader, is_web_url
from .logging_setup import get_logger

_OPTION_KEYS = ("padding", "border_size", "inset_size", "text_size", "pixelation")
_THEME_KEYS = tuple(f.name for f in fields(TileTheme))


@dataclass(frozen=True)
class TileBuilder:
    number: int
    name: str
    image: str
    unlocked: bool = False


@dataclass(frozen=True)
class ContentRect:
    x1: int
    y1: int
    x2: int
    y2: int

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x1, self.y1, self.x2, self.y2)


@dataclass
class BoardBuilder:
    rows: int
    cols: int
    content_rect: ContentRect
    tile_size: int
    image: str
    tiles: list[TileBuilder] = field(default_factory=list)
    tile_render_options: TileRenderOptions | None = None

    @classmethod
    def from_dict(
        cls, raw: dict[str, Any], base_dir: Path | None = None, theme: str | None = None
    ) -> BoardBuilder:
        try:
            tile_size = int(raw["tile_size"])
            return cls(
                rows=int(raw["rows"]),
                cols=int(raw["cols"]),
                content_rect=_parse_content_rect(raw["content_rect"]),
                tile_size=tile_size,
                image=_resolve_location(str(raw["image"]), base_dir),
                tiles=[
                    TileBuilder(
                        number=int(t["number"]),
                        name=str(t["name"]),
                        image=_resolve_location(str(t["image"]), base_dir),
                        unlocked=bool(t.get("unlocked", False)),
                    )
                    for t in raw.get("tiles") or []
                ],
                tile_render_options=parse_tile_render_options(raw.get("tile_render_options") or {}, tile_size, theme),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise BoardFileError(f"malformed board description: {exc!r}") from exc

    def validate(self, dimensions: tuple[int, int] | None = None) -> None:
        """Run the tile checks, plus the geometry checks when the background size is known."""
        tiles = sorted(self.tiles, key=lambda t: t.number)
        validate_tile_count(self.rows, self.cols, tiles)
        validate_tile_numbers(tiles)
        if dimensions is not None:
            validate_content_rect(dimensions, self.content_rect, self.tile_size, self.rows, self.cols)

    def build(self, image_loader: ImageLoader) -> Board:
        logger = get_logger()
        tiles = sorted(self.tiles, key=lambda t: t.number)
        validate_tile_count(self.rows, self.cols, tiles)
        validate_tile_numbers(tiles)

        background = image_loader.load(self.image)
        validate_content_rect(background.size, self.content_rect, self.tile_size, self.rows, self.cols)

        built = tuple(
            Tile(number=t.number, name=t.name, image=image_loader.load(t.image), unlocked=t.unlocked) for t in tiles
        )
        logger.info(
            "built %dx%d board with %d tiles",
            self.rows,
            self.cols,
            len(built),
            extra={"event": "board_built", "tiles": len(built), "background": self.image},
        )
        return Board(
            rows=self.rows,
            cols=self.cols,
            content_rect=self.content_rect.as_tuple(),
            tile_size=self.tile_size,
            image=background,
            tiles=built,
            tile_render_options=self.tile_render_options,
        )


def _parse_content_rect(raw: Any) -> ContentRect:
    if isinstance(raw, dict):
        return ContentRect(int(raw["x1"]), int(raw["y1"]), int(raw["x2"]), int(raw["y2"]))
    x1, y1, x2, y2 = (int(v) for v in raw)
    return ContentRect(x1, y1, x2, y2)


def _resolve_location(location: str, base_dir: Path | None) -> str:
    if base_dir is None or is_web_url(location):
        return location
    path = Path(location).expanduser()
    if path.is_absolute():
        return str(path)
    return str(base_dir / path)


def _parse_theme(raw: dict[str, Any], base: TileTheme) -> TileTheme:
    unknown = set(raw) - set(_THEME_KEYS)
    if unknown:
        raise ValueError(f"unknown theme keys {sorted(unknown)}")
    return replace(base, **{k: parse_color(v) for k, v in raw.items()})


def parse_tile_render_options(raw: dict[str, Any], tile_size: int, theme: str | None = None) -> TileRenderOptions:
    locked, unlocked = get_theme(raw.get("theme", theme))
    values: dict[str, Any] = {k: raw[k] for k in _OPTION_KEYS if k in raw}
    for key in ("padding", "border_size", "inset_size", "text_size"):
        if key in values:
            values[key] = int(values[key])
    if values.get("pixelation") is not None:
        values["pixelation"] = max(0, min(255, int(values["pixelation"])))
    return TileRenderOptions(
        tile_size=tile_size,
        locked_theme=_parse_theme(raw.get("locked_theme") or {}, locked),
        unlocked_theme=_parse_theme(raw.get("unlocked_theme") or {}, unlocked),
        **values,
    )


def read_board_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise BoardFileError(f"cannot read board file {path}: {exc}") from exc
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text) or {}
        else:
            raw = json.loads(text)
    except (yaml.YAMLError, ValueError) as exc:
        raise BoardFileError(f"cannot parse board file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise BoardFileError(f"board file {path} must contain a mapping")
    return raw


def load_board_file(path: str | Path, theme: str | None = None) -> BoardBuilder:
    """Read a board file; ``theme`` is the preset used when the file names none."""
    path = Path(path)
    return BoardBuilder.from_dict(read_board_file(path), base_dir=path.resolve().parent, theme=theme)


def validate_content_rect(
    dimensions: tuple[int, int],
    content_rect: ContentRect,
    tile_size: int,
    rows: int,
    cols: int,
) -> None:
    width, height = dimensions
    if content_rect.x1 >= content_rect.x2 or content_rect.y1 >= content_rect.y2:
        raise InvalidDimensionsError(width, height, content_rect, "content rectangle is empty or inverted")
    if content_rect.x2 > width or content_rect.y2 > height:
        raise InvalidDimensionsError(width, height, content_rect, "content rectangle exceeds the image")
    rect_width = content_rect.x2 - content_rect.x1
    rect_height = content_rect.y2 - content_rect.y1
    if tile_size * cols > rect_width or tile_size * rows > rect_height:
        raise InvalidDimensionsError(width, height, content_rect, "tile grid does not fit the content rectangle")


def validate_tile_count(rows: int, cols: int, tiles: Iterable[TileBuilder]) -> None:
    expected = rows * cols
    actual = len(list(tiles))
    if expected != actual:
        raise WrongNumberOfTilesError(expected, actual)


def validate_tile_numbers(tiles: Iterable[TileBuilder]) -> None:
    tiles = list(tiles)
    missing = set(range(1, len(tiles) + 1))
    unexpected: set[int] = set()
    for tile in tiles:
        if tile.number in missing:
            missing.remove(tile.number)
        else:
            unexpected.add(tile.number)
    if unexpected:
        raise UnexpectedTilesError(unexpected)
    if missing:
        raise MissingTilesError(missing)
