"""Exceptions for the storadapt package."""

from typing import Optional, Union


class StoreError(Exception):
    """Base exception for all store errors."""

    pass


class PathError(StoreError):
    """A deep path could not be traversed.

    Attributes:
        path: Dotted path prefix consumed when the error occurred
        segment: The segment being resolved, if any
    """

    def __init__(self, message: str, path: str = "", segment: Optional[Union[str, int]] = None):
        self.path = path
        self.segment = segment
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError subclasses would otherwise repr() the message
        return self.args[0] if self.args else ""


class NotAnArrayError(PathError, TypeError):
    """An index segment met a node that is not a list."""

    pass


class NotAnObjectError(PathError, TypeError):
    """A key segment met a node that is not a dict."""

    pass


class NegativeIndexError(PathError, IndexError):
    """An index segment resolved to a negative integer."""

    pass


class IndexOutOfBoundsError(PathError, IndexError):
    """An index segment is past the end of its list and may not extend it."""

    pass


class PathNotFoundError(PathError, KeyError):
    """An intermediate list slot is empty and auto-creation is off."""

    pass


class PropertyMissingError(PathNotFoundError):
    """A key segment names a property the dict does not have."""

    pass


class NullInPathError(PathError):
    """An intermediate node is None with more path remaining."""

    pass


class ShapeMismatchError(StoreError, TypeError):
    """Stored root value's kind disagrees with the first path segment."""

    def __init__(self, key: str, expected: str, actual: type):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Type mismatch: expected {expected} for key {key!r}, got {actual.__name__}"
        )


class BackendError(StoreError):
    """The storage backend failed."""

    pass


class SerializationError(StoreError):
    """Failed to encode or decode a value."""

    pass
