"""Value encoding for storadapt."""

import json
from datetime import date, datetime
from typing import Any

from .exceptions import SerializationError
from .path import EMPTY

_MARKER_KEYS = frozenset({"__empty__", "__datetime__", "__date__", "__dict__"})


class Serializer:
    """Encode values to strings for a backend and decode them back.

    Strings are stored as-is. Everything else is written as JSON, with
    markers for values JSON cannot represent:

        datetime  -> {"__datetime__": "2024-01-01T09:30:00"}
        date      -> {"__date__": "2024-01-01"}
        EMPTY     -> {"__empty__": true}

    A dict of your own whose only key is one of these marker names is
    written as {"__dict__": {...}} so it reads back as the same dict.

    Decoding parses JSON and restores markers. Strings that are not JSON
    are returned unchanged, so a value stored as a plain string reads back
    as that string.

    Example:
        serializer = Serializer()

        raw = serializer.encode({"when": datetime(2024, 1, 1), "tags": ["a"]})
        serializer.decode(raw)
        # {'when': datetime.datetime(2024, 1, 1, 0, 0), 'tags': ['a']}
    """

    def __init__(self, indent: Any = None):
        """Initialize the serializer.

        Args:
            indent: Passed to json.dumps; None writes compact JSON
        """
        self.indent = indent

    def encode(self, value: Any) -> str:
        """Encode a value to a string.

        Raises:
            SerializationError: If the value contains unsupported types
        """
        if isinstance(value, str):
            return value
        try:
            return json.dumps(
                self._to_json_compatible(value),
                indent=self.indent,
                ensure_ascii=False,
                allow_nan=False,
            )
        except SerializationError:
            raise
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode {type(value).__name__}: {e}")

    def decode(self, raw: str) -> Any:
        """Decode a string produced by encode(), or any stored string."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            return raw
        return self._from_json_compatible(data)

    def _to_json_compatible(self, value: Any) -> Any:
        """Convert a value to JSON-compatible format."""
        if value is None:
            return None
        if value is EMPTY:
            return {"__empty__": True}
        if isinstance(value, (str, int, float, bool)):
            return value
        # datetime before date: datetime is a date subclass
        if isinstance(value, datetime):
            return {"__datetime__": value.isoformat()}
        if isinstance(value, date):
            return {"__date__": value.isoformat()}
        if isinstance(value, (list, tuple)):
            return [self._to_json_compatible(v) for v in value]
        if isinstance(value, dict):
            for k in value:
                if not isinstance(k, str):
                    raise SerializationError(
                        f"Cannot serialize dict key {k!r}: keys must be strings"
                    )
            data = {k: self._to_json_compatible(v) for k, v in value.items()}
            # A user dict shaped like a marker is wrapped so decode leaves it alone
            if len(value) == 1 and next(iter(value)) in _MARKER_KEYS:
                return {"__dict__": data}
            return data
        raise SerializationError(f"Cannot serialize type: {type(value)}")

    def _from_json_compatible(self, value: Any) -> Any:
        """Convert a value from JSON-compatible format."""
        if value is None:
            return None
        if isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, list):
            return [self._from_json_compatible(v) for v in value]
        if isinstance(value, dict):
            # Check for special markers
            if len(value) == 1:
                if isinstance(value.get("__dict__"), dict):
                    return self._plain_dict(value["__dict__"])
                if value.get("__empty__") is True:
                    return EMPTY
                try:
                    if isinstance(value.get("__datetime__"), str):
                        return datetime.fromisoformat(value["__datetime__"])
                    if isinstance(value.get("__date__"), str):
                        return date.fromisoformat(value["__date__"])
                except ValueError:
                    # Not written by encode(); keep it as data
                    pass
            return self._plain_dict(value)
        return value

    def _plain_dict(self, value: dict) -> dict:
        return {k: self._from_json_compatible(v) for k, v in value.items()}
