"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from tileboard_renderer.themes import DEFAULT_THEME_NAME, THEMES

from .logging_setup import config_root, get_logger


CONFIG_VERSION = 1

_NULLABLE_KEYS = ("font_path", "pixelation")


@dataclass
class ImagesConfig:
    cache_dir: str = ".cache/images"
    timeout_s: int = 30


@dataclass
class TextConfig:
    font_path: str | None = None
    pixelation: int | None = None


@dataclass
class RenderConfig:
    workers: int = 1
    theme: str = DEFAULT_THEME_NAME
    output: str = "board.png"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    images: ImagesConfig = field(default_factory=ImagesConfig)
    text: TextConfig = field(default_factory=TextConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in (raw or {}).items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_images(cfg: AppConfig) -> None:
    cfg.images.timeout_s = max(1, min(300, int(cfg.images.timeout_s)))


def _normalize_text(cfg: AppConfig) -> None:
    if cfg.text.pixelation is not None:
        cfg.text.pixelation = max(0, min(255, int(cfg.text.pixelation)))
    if not cfg.text.font_path:
        cfg.text.font_path = None


def _normalize_render(cfg: AppConfig) -> None:
    cfg.render.workers = max(1, min(32, int(cfg.render.workers)))
    if cfg.render.theme not in THEMES:
        cfg.render.theme = DEFAULT_THEME_NAME


def _normalize(cfg: AppConfig) -> AppConfig:
    _normalize_images(cfg)
    _normalize_text(cfg)
    _normalize_render(cfg)
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    return cfg


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        get_logger().warning("config load error: %s, using defaults", exc, extra={"event": "config_invalid"})
        return AppConfig()

    cfg = AppConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        images=_merge(ImagesConfig, raw.get("images", {})),
        text=_merge(TextConfig, raw.get("text", {})),
        render=_merge(RenderConfig, raw.get("render", {})),
        diagnostics=_merge(DiagnosticsConfig, raw.get("diagnostics", {})),
    )
    return _normalize(cfg)


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def set_config_value(cfg: AppConfig, dotted_key: str, value: str) -> AppConfig:
    """Assign ``section.key=value`` from the command line, coercing to the current type."""
    section_name, _, key = dotted_key.partition(".")
    section = getattr(cfg, section_name, None)
    if section is None or not key or not hasattr(section, key):
        raise KeyError(dotted_key)

    current = getattr(section, key)
    parsed: Any
    if value.lower() in ("none", "null", ""):
        if key not in _NULLABLE_KEYS:
            raise ValueError(f"{dotted_key} may not be empty")
        parsed = None
    elif isinstance(current, bool):
        parsed = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(current, int) or key == "pixelation":
        parsed = int(value)
    else:
        parsed = value
    setattr(section, key, parsed)
    return _normalize(cfg)
