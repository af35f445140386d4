"""CLI entrypoints for rendering boards and tiles, validation, themes, and settings."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, replace
from pathlib import Path

from PIL import ImageDraw

from tileboard_core import (
    AppConfig,
    ImageLoader,
    ImageLoaderOptions,
    TileboardError,
    load_board_file,
    load_config,
    save_config,
    set_config_value,
)
from tileboard_core.logging_setup import configure_logging, get_logger, log_context
from tileboard_renderer import (
    Board,
    BoardRenderer,
    FontLoadError,
    TextRenderer,
    Tile,
    TileRenderOptions,
    TileRenderer,
    get_theme,
    list_themes,
    new_canvas,
    render_tile,
)

SAMPLE_TILE_SIZE = 216
SAMPLE_GRID = 5


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _image_loader(cfg: AppConfig, cache_dir: str | None = None) -> ImageLoader:
    return ImageLoader(
        ImageLoaderOptions(
            cache_dir=Path(cache_dir or cfg.images.cache_dir).expanduser(),
            timeout_s=cfg.images.timeout_s,
        )
    )


def _text_renderer(cfg: AppConfig, font_path: str | None, size: int) -> TextRenderer:
    return TextRenderer(font_path or cfg.text.font_path, size=size)


def _pixelation(cfg: AppConfig, override: int | None) -> int | None:
    return override if override is not None else cfg.text.pixelation


def _save(image, out: str) -> Path:
    path = Path(out).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    return path


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    builder = load_board_file(args.board, theme=cfg.render.theme)
    board = builder.build(_image_loader(cfg, args.cache_dir))

    options = board.tile_render_options or TileRenderOptions(tile_size=board.tile_size)
    pixelation = _pixelation(cfg, args.pixelate)
    if options.pixelation is None and pixelation is not None:
        options = replace(options, pixelation=pixelation)
    board = replace(board, tile_render_options=options)

    tile_renderer = TileRenderer(_text_renderer(cfg, args.font, options.text_size), options)
    renderer = BoardRenderer(tile_renderer, workers=args.workers or cfg.render.workers)
    image = renderer.render(board)
    out = _save(image, args.out or cfg.render.output)

    _print_json(
        {
            "success": True,
            "output": str(out),
            "size": list(image.size),
            "rows": board.rows,
            "cols": board.cols,
            "unlocked": sum(1 for t in board.tiles if t.unlocked),
        }
    )
    return 0


def cmd_render_tile(args: argparse.Namespace) -> int:
    cfg = load_config()
    locked, unlocked = get_theme(args.theme or cfg.render.theme)
    options = TileRenderOptions(
        tile_size=args.size,
        pixelation=_pixelation(cfg, args.pixelate),
        locked_theme=locked,
        unlocked_theme=unlocked,
    )
    icon = _image_loader(cfg, args.cache_dir).load(args.image)
    tile = Tile(number=args.number, name=args.name, image=icon, unlocked=args.unlocked)
    image = render_tile(tile, options, _text_renderer(cfg, args.font, options.text_size))
    out = _save(image, args.out)
    _print_json({"success": True, "output": str(out), "size": list(image.size)})
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    cfg = load_config()
    builder = load_board_file(args.board, theme=cfg.render.theme)
    background = _image_loader(cfg, args.cache_dir).load(builder.image)
    builder.validate(background.size)
    _print_json(
        {
            "success": True,
            "rows": builder.rows,
            "cols": builder.cols,
            "tiles": len(builder.tiles),
            "tile_size": builder.tile_size,
            "content_rect": asdict(builder.content_rect),
            "background": list(background.size),
        }
    )
    return 0


def build_sample_board() -> Board:
    """Offline demo: a 5x5 board of generated icons on a magenta background."""
    size = SAMPLE_TILE_SIZE
    side = 140 + size * SAMPLE_GRID
    background = new_canvas(side, side, (240, 20, 200, 255))
    tiles = []
    for number in range(1, SAMPLE_GRID * SAMPLE_GRID + 1):
        icon = new_canvas(160 + 8 * (number % 5), 120 + 10 * (number % 4))
        hue = (number * 47) % 360
        ImageDraw.Draw(icon).ellipse(
            (0, 0, icon.width - 1, icon.height - 1), fill=f"hsl({hue}, 80%, 55%)", outline=(0, 0, 0, 255), width=3
        )
        tiles.append(Tile(number=number, name=f"Tile {number}", image=icon, unlocked=number % 3 == 0))
    return Board(
        rows=SAMPLE_GRID,
        cols=SAMPLE_GRID,
        content_rect=(20, 20, 120 + size * SAMPLE_GRID, 120 + size * SAMPLE_GRID),
        tile_size=size,
        image=background,
        tiles=tuple(tiles),
    )


def cmd_sample(args: argparse.Namespace) -> int:
    cfg = load_config()
    board = build_sample_board()
    options = TileRenderOptions(tile_size=board.tile_size, pixelation=_pixelation(cfg, args.pixelate))
    renderer = BoardRenderer(TileRenderer(_text_renderer(cfg, args.font, options.text_size), options))
    out = _save(renderer.render(board), args.out)
    _print_json({"success": True, "output": str(out)})
    return 0


def cmd_themes(_args: argparse.Namespace) -> int:
    _print_json(
        {
            name: {
                "locked": asdict(get_theme(name)[0]),
                "unlocked": asdict(get_theme(name)[1]),
            }
            for name in list_themes()
        }
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    cfg = load_config()
    if args.set:
        for assignment in args.set:
            key, sep, value = assignment.partition("=")
            if not sep:
                raise SystemExit(f"Expected KEY=VALUE, got {assignment!r}")
            try:
                set_config_value(cfg, key.strip(), value.strip())
            except (KeyError, ValueError) as exc:
                raise SystemExit(f"Invalid setting {assignment!r}: {exc}") from exc
        save_config(cfg)
    _print_json(asdict(cfg))
    return 0


def _add_render_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--font", default=None, help="Optional TrueType/OpenType font path")
    cmd.add_argument("--pixelate", type=int, default=None, help="Alpha cutoff (0-255) for crisp pixel text")
    cmd.add_argument("--cache-dir", default=None, help="Directory for downloaded images")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tileboard", description="TileBoard board image generator")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render a board file to PNG")
    render_cmd.add_argument("--board", required=True, help="Board description (JSON or YAML)")
    render_cmd.add_argument("--out", default=None, help="Output PNG path")
    render_cmd.add_argument("--workers", type=int, default=None, help="Tiles rendered in parallel")
    _add_render_flags(render_cmd)
    render_cmd.set_defaults(func=cmd_render)

    tile_cmd = sub.add_parser("render-tile", help="Render a single tile to PNG")
    tile_cmd.add_argument("--image", required=True, help="Icon path or URL")
    tile_cmd.add_argument("--number", type=int, required=True)
    tile_cmd.add_argument("--name", required=True)
    tile_cmd.add_argument("--unlocked", action="store_true")
    tile_cmd.add_argument("--size", type=int, default=SAMPLE_TILE_SIZE, help="Tile side in pixels")
    tile_cmd.add_argument("--theme", default=None, choices=list_themes())
    tile_cmd.add_argument("--out", default="tile.png")
    _add_render_flags(tile_cmd)
    tile_cmd.set_defaults(func=cmd_render_tile)

    validate_cmd = sub.add_parser("validate", help="Check a board file without rendering")
    validate_cmd.add_argument("--board", required=True)
    validate_cmd.add_argument("--cache-dir", default=None, help="Directory for downloaded images")
    validate_cmd.set_defaults(func=cmd_validate)

    sample_cmd = sub.add_parser("sample", help="Render the built-in demo board")
    sample_cmd.add_argument("--out", default="board_sample.png")
    sample_cmd.add_argument("--font", default=None, help="Optional TrueType/OpenType font path")
    sample_cmd.add_argument("--pixelate", type=int, default=None, help="Alpha cutoff (0-255) for crisp pixel text")
    sample_cmd.set_defaults(func=cmd_sample)

    themes_cmd = sub.add_parser("themes", help="List built-in tile themes")
    themes_cmd.set_defaults(func=cmd_themes)

    config_cmd = sub.add_parser("config", help="Show or update settings")
    config_cmd.add_argument("--set", action="append", default=None, metavar="SECTION.KEY=VALUE")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    with log_context(command=args.command, board=getattr(args, "board", None)):
        try:
            return int(args.func(args))
        except (TileboardError, FontLoadError) as exc:
            get_logger().error(
                "%s failed: %s",
                args.command,
                exc,
                extra={"event": "command_failed", "error_type": type(exc).__name__},
            )
            _print_json({"success": False, "error": str(exc)})
            return 2


if __name__ == "__main__":
    raise SystemExit(main())
