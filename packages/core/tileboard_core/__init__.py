"""Core services for board loading, image caching, settings, and logging."""

from .builder import BoardBuilder, ContentRect, TileBuilder, load_board_file, parse_tile_render_options
from .config import AppConfig, load_config, save_config, set_config_value
from .errors import (
    BoardBuilderError,
    BoardFileError,
    ImageLoadError,
    InvalidArgumentError,
    InvalidConfigError,
    InvalidDimensionsError,
    MissingTilesError,
    TileboardError,
    UnexpectedTilesError,
    WrongNumberOfTilesError,
)
from .images import ImageLoader, ImageLoaderOptions, parse_web_url_and_cache_path

__all__ = [
    "AppConfig",
    "BoardBuilder",
    "BoardBuilderError",
    "BoardFileError",
    "ContentRect",
    "ImageLoadError",
    "ImageLoader",
    "ImageLoaderOptions",
    "InvalidArgumentError",
    "InvalidConfigError",
    "InvalidDimensionsError",
    "MissingTilesError",
    "TileBuilder",
    "TileboardError",
    "UnexpectedTilesError",
    "WrongNumberOfTilesError",
    "load_board_file",
    "load_config",
    "parse_tile_render_options",
    "parse_web_url_and_cache_path",
    "save_config",
    "set_config_value",
]
