"""Dot-path traversal and deep mutation over nested lists and dicts.

Everything here is pure: functions take an in-memory value tree and walk,
create or mutate it in place. No I/O.

A path is a list of segments. Segments are classified lexically before the
target node is ever inspected:

    "0", "12", "007"  -> index segments (lists)
    "name", "-1", ""  -> key segments (dicts)
    3                  -> index segment (programmatic paths only)

Example:
    data = {}
    write_at(data, parse_path("users.0.name"), "Alice", create_path=True)
    # {'users': [{'name': 'Alice'}]}

    read_at(data, ["users", "0", "name"])  # 'Alice'
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from .exceptions import (
    IndexOutOfBoundsError,
    NegativeIndexError,
    NotAnArrayError,
    NotAnObjectError,
    NullInPathError,
    PathError,
    PathNotFoundError,
    PropertyMissingError,
)

Segment = Union[str, int]

# Largest index accepted; anything above is rejected rather than
# extending a list to an absurd length.
MAX_INDEX = 2**53 - 1

# Default cap on how many slots create_path may add to one list in one step.
MAX_EXTEND = 10_000

_INDEX_RE = re.compile(r"[0-9]+")


class _Empty:
    """Marker for list slots that hold no value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EMPTY"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Empty, ())


EMPTY = _Empty()


@dataclass(frozen=True)
class Index:
    """A segment addressing a list position."""

    position: int


@dataclass(frozen=True)
class Key:
    """A segment addressing a dict property."""

    name: str


@dataclass(frozen=True)
class Traversal:
    """Outcome of resolve(): either a value or the error that stopped it."""

    value: Any = None
    error: Optional[PathError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, raising the error if the traversal failed."""
        if self.error is not None:
            raise self.error
        return self.value


def parse_path(address: str) -> List[str]:
    """Split a dotted address into segments, dropping empty ones.

    >>> parse_path(".a..b.")
    ['a', 'b']
    """
    return [segment for segment in address.split(".") if segment]


def classify_segment(segment: Segment) -> Union[Index, Key]:
    """Classify a segment as a list index or a dict key."""
    if isinstance(segment, int) and not isinstance(segment, bool):
        return Index(segment)
    if _INDEX_RE.fullmatch(segment):
        return Index(int(segment))
    return Key(segment)


def is_index_segment(segment: Segment) -> bool:
    return isinstance(classify_segment(segment), Index)


def is_missing(value: Any) -> bool:
    return value is None or value is EMPTY


def matches_root_shape(value: Any, first_segment: Segment) -> bool:
    """Check a root value's kind against the first segment of a path."""
    if is_index_segment(first_segment):
        return isinstance(value, list)
    return isinstance(value, dict)


def _join(path: Sequence[Segment], end: int) -> str:
    return ".".join(str(s) for s in path[:end]) or "<root>"


def _new_container(next_segment: Segment) -> Any:
    return [] if is_index_segment(next_segment) else {}


def _check_index(
    node: Any,
    position: int,
    path: Sequence[Segment],
    i: int,
    create_path: bool,
    max_extend: int = MAX_EXTEND,
) -> Optional[PathError]:
    """Validate (and possibly extend) a list for an index segment."""
    segment = path[i]
    if not isinstance(node, list):
        return NotAnArrayError(f"{_join(path, i)} is not an array", _join(path, i), segment)
    if position < 0:
        return NegativeIndexError(
            f"Array index {position} cannot be negative", _join(path, i), segment
        )
    if position > MAX_INDEX:
        return IndexOutOfBoundsError(
            f"Array index {position} exceeds the maximum of {MAX_INDEX} at {_join(path, i + 1)}",
            _join(path, i),
            segment,
        )
    if position >= len(node):
        if not create_path:
            return IndexOutOfBoundsError(
                f"Array index {position} out of bounds at {_join(path, i + 1)}",
                _join(path, i),
                segment,
            )
        if position + 1 - len(node) > max_extend:
            return IndexOutOfBoundsError(
                f"Array index {position} at {_join(path, i + 1)} would add more than "
                f"{max_extend} slots to a list of length {len(node)}",
                _join(path, i),
                segment,
            )
        node.extend([EMPTY] * (position + 1 - len(node)))
    return None


def resolve(
    root: Any,
    path: Sequence[Segment],
    stop_before_last: bool = False,
    create_path: bool = False,
    max_extend: int = MAX_EXTEND,
) -> Traversal:
    """Walk a path through a value tree.

    Args:
        root: The value tree to walk
        path: Path segments
        stop_before_last: If True, return the container that holds the last
            segment instead of the value at the last segment
        create_path: If True, missing intermediate containers are created
            (list or dict, chosen by the following segment) and lists are
            extended with EMPTY
        max_extend: Most slots create_path may add to a single list

    Returns:
        Traversal holding the resolved value, or the PathError that stopped
        the walk. Path errors are never raised from here.
    """
    current = root
    end = len(path) - 1 if stop_before_last else len(path)

    for i in range(end):
        segment = path[i]
        is_last = i == len(path) - 1
        kind = classify_segment(segment)

        if isinstance(kind, Index):
            error = _check_index(current, kind.position, path, i, create_path, max_extend)
            if error is not None:
                return Traversal(error=error)
            slot = kind.position
            if is_missing(current[slot]) and not is_last:
                if not create_path:
                    return Traversal(
                        error=PathNotFoundError(
                            f"Path does not exist: {_join(path, i + 1)}",
                            _join(path, i),
                            segment,
                        )
                    )
                current[slot] = _new_container(path[i + 1])
        else:
            if not isinstance(current, dict):
                return Traversal(
                    error=NotAnObjectError(
                        f"{_join(path, i)} is not an object", _join(path, i), segment
                    )
                )
            slot = kind.name
            if slot not in current:
                if not create_path or is_last:
                    return Traversal(
                        error=PropertyMissingError(
                            f'Property "{slot}" does not exist at {_join(path, i + 1)}',
                            _join(path, i),
                            segment,
                        )
                    )
                current[slot] = _new_container(path[i + 1])
            elif is_missing(current[slot]) and not is_last:
                if not create_path:
                    return Traversal(
                        error=NullInPathError(
                            f"Path {_join(path, i + 1)} is null or undefined",
                            _join(path, i + 1),
                            segment,
                        )
                    )
                current[slot] = _new_container(path[i + 1])

        current = current[slot]

    return Traversal(value=current)


def traverse(
    root: Any,
    path: Sequence[Segment],
    stop_before_last: bool = False,
    create_path: bool = False,
    max_extend: int = MAX_EXTEND,
    on_error: Optional[Callable[[PathError], bool]] = None,
) -> Any:
    """Walk a path, raising on failure unless on_error says otherwise.

    on_error receives the PathError. Returning False suppresses it and
    traverse() returns None; returning True (or passing no hook) raises.
    """
    result = resolve(
        root,
        path,
        stop_before_last=stop_before_last,
        create_path=create_path,
        max_extend=max_extend,
    )
    if result.ok:
        return result.value
    if on_error is not None and not on_error(result.error):
        return None
    raise result.error


def read_at(root: Any, path: Sequence[Segment]) -> Any:
    """Return the value at path. List holes come back as EMPTY."""
    return traverse(root, path)


def _parent_and_slot(
    root: Any, path: Sequence[Segment], create_path: bool, max_extend: int = MAX_EXTEND
):
    parent = traverse(
        root, path, stop_before_last=True, create_path=create_path, max_extend=max_extend
    )
    i = len(path) - 1
    kind = classify_segment(path[i])

    if isinstance(kind, Index):
        error = _check_index(parent, kind.position, path, i, create_path, max_extend)
        if error is not None:
            raise error
        return parent, kind.position

    if not isinstance(parent, dict):
        raise NotAnObjectError(f"{_join(path, i)} is not an object", _join(path, i), path[i])
    return parent, kind.name


def write_at(
    root: Any,
    path: Sequence[Segment],
    value: Any,
    create_path: bool = False,
    max_extend: int = MAX_EXTEND,
) -> None:
    """Assign value at path, mutating root in place.

    Raises:
        ValueError: If path is empty
        PathError: If the path cannot be resolved
    """
    if not path:
        raise ValueError("Cannot write at an empty path")
    parent, slot = _parent_and_slot(root, path, create_path, max_extend)
    parent[slot] = value


def delete_at(root: Any, path: Sequence[Segment]) -> bool:
    """Remove the value at path, mutating root in place.

    Dict properties are removed; list slots are set to EMPTY so the list
    keeps its length.

    Returns:
        True if something was removed, False if the path did not exist

    Raises:
        ValueError: If path is empty
        PathError: On kind mismatches along the path
    """
    if not path:
        raise ValueError("Cannot delete at an empty path")
    try:
        parent, slot = _parent_and_slot(root, path, create_path=False)
    except (PathNotFoundError, IndexOutOfBoundsError, NullInPathError):
        return False

    if isinstance(parent, list):
        if parent[slot] is EMPTY:
            return False
        parent[slot] = EMPTY
        return True
    if slot not in parent:
        return False
    del parent[slot]
    return True
