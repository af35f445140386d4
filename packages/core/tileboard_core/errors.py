"""Error types raised by the loading and validation services."""

from __future__ import annotations


class TileboardError(Exception):
    pass


class InvalidConfigError(TileboardError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid configuration: {message}")


class InvalidArgumentError(TileboardError):
    def __init__(self, argument: str, details: str) -> None:
        super().__init__(f"Argument '{argument}' is invalid - details: {details}")
        self.argument = argument
        self.details = details


class ImageLoadError(TileboardError):
    pass


class BoardBuilderError(TileboardError):
    pass


class BoardFileError(BoardBuilderError):
    pass


class WrongNumberOfTilesError(BoardBuilderError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"wrong number of tiles: expected {expected}, actual {actual}")
        self.expected = expected
        self.actual = actual


class MissingTilesError(BoardBuilderError):
    def __init__(self, numbers: set[int]) -> None:
        super().__init__(f"tiles must be consecutively numbered, missing {sorted(numbers)}")
        self.numbers = set(numbers)


class UnexpectedTilesError(BoardBuilderError):
    def __init__(self, numbers: set[int]) -> None:
        super().__init__(f"tiles must be consecutively numbered, unexpected {sorted(numbers)}")
        self.numbers = set(numbers)


class InvalidDimensionsError(BoardBuilderError):
    def __init__(self, width: int, height: int, content_rect: object, reason: str) -> None:
        super().__init__(
            f"invalid dimensions: {width}px x {height}px image cannot support "
            f"content rectangle {content_rect} ({reason})"
        )
        self.width = width
        self.height = height
        self.content_rect = content_rect
        self.reason = reason
