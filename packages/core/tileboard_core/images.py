"""Image loading from local paths or web URLs, with a filesystem cache for downloads."""

from __future__ import annotations

import urllib.error
import urllib.request
from dataclasses import dataclass, field
from importlib import metadata
from io import BytesIO
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit, urlunsplit

from PIL import Image

from .errors import ImageLoadError, InvalidArgumentError, InvalidConfigError
from .logging_setup import get_logger


def _installed_version() -> str:
    try:
        return metadata.version("tileboard")
    except Exception:
        return "0.1.0"


DEFAULT_CACHE_DIR = Path(".cache/images")
DEFAULT_USER_AGENT = f"tileboard/{_installed_version()}"


@dataclass
class ImageLoaderOptions:
    cache_dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)
    timeout_s: int = 30
    user_agent: str = DEFAULT_USER_AGENT


def parse_web_url_and_cache_path(url: str) -> tuple[str, Path]:
    """Normalize ``url`` to https and derive its cache location.

    The cache path is the host split on dots followed by the URL path segments,
    e.g. ``https://a.example.org/img/x.png`` -> ``a/example/org/img/x.png``.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme == "http":
        scheme = "https"
    if scheme != "https":
        raise InvalidArgumentError("url", "must be an http or https URL")
    host = parts.hostname
    if not host:
        raise InvalidArgumentError("url", "must specify a hostname")
    if parts.path in ("", "/") or not PurePosixPath(parts.path).suffix:
        raise InvalidArgumentError("url", "must specify a path to a file")

    segments = [s for s in parts.path.split("/") if s]
    if any(s in (".", "..") for s in segments):
        raise InvalidArgumentError("url", "must not contain relative path segments")

    cache_path = Path(*host.split("."), *segments)
    normalized = urlunsplit((scheme, parts.netloc, parts.path, parts.query, ""))
    return normalized, cache_path


def is_web_url(location: str) -> bool:
    return urlsplit(location).scheme.lower() in ("http", "https")


class ImageLoader:
    """Loads RGBA images from any supported source, caching downloads on disk."""

    def __init__(self, options: ImageLoaderOptions | None = None) -> None:
        self.options = options or ImageLoaderOptions()
        self.logger = get_logger()
        cache_dir = Path(self.options.cache_dir).expanduser()
        if cache_dir.resolve() == Path.cwd().resolve():
            raise InvalidConfigError("Image loader may not cache to the current directory.")
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InvalidConfigError(f"cannot create image cache {cache_dir}: {exc}") from exc
        self.cache_dir = cache_dir

    def load(self, location: str) -> Image.Image:
        """Treat ``location`` as a web URL when it has an http(s) scheme, else as a path."""
        if is_web_url(location):
            return self.load_from_url(location)
        return self.load_from_file(location)

    def load_from_url(self, url: str) -> Image.Image:
        url, partial_cache_path = parse_web_url_and_cache_path(url)
        cache_path = self.cache_dir / partial_cache_path
        if cache_path.is_file():
            self.logger.info("returning image from filesystem cache: %s", cache_path, extra={"event": "image_cache_hit"})
            return self.load_from_file(cache_path)

        self.logger.info("loading image from URL: %s", url, extra={"event": "image_download"})
        data = self._fetch(url)
        image = _decode(data, url)
        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            cache_path.write_bytes(data)
        except OSError as exc:
            raise ImageLoadError(f"cannot write image cache {cache_path}: {exc}") from exc
        self.logger.info("cached image to filesystem: %s", cache_path, extra={"event": "image_cached"})
        return image

    def load_from_file(self, path: str | Path) -> Image.Image:
        try:
            with Image.open(path) as im:
                return im.convert("RGBA")
        except OSError as exc:
            raise ImageLoadError(f"cannot load image {path}: {exc}") from exc

    def _fetch(self, url: str) -> bytes:
        req = urllib.request.Request(url, headers={"User-Agent": self.options.user_agent})
        try:
            with urllib.request.urlopen(req, timeout=self.options.timeout_s) as resp:
                return resp.read()
        except (urllib.error.URLError, OSError) as exc:
            raise ImageLoadError(f"cannot download {url}: {exc}") from exc


def _decode(data: bytes, source: str) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as im:
            return im.convert("RGBA")
    except OSError as exc:
        raise ImageLoadError(f"{source} is not a decodable image: {exc}") from exc
