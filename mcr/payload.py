"""Keyed, ordered views over event payloads.

The reconciler reads every payload through a :class:`KeyedPayload`:

 - :class:`MappingPayload` wraps mappings (and lists/tuples, keyed by position)
 - :class:`LegacyPayload` wraps objects that are iterable (over keys) and
   subscriptable but are not mappings. This shape is deprecated.

Payload keys are matched against row keys by ``str(key)``. An entry is
*present* only when its key exists and its value is not ``None``.
Two keys with the same string form (``1`` and ``"1"``) make a payload unreadable.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterator

from .errors import TypeMismatch

EXPECTED_SHAPE = "mapping, sequence or (iterable and subscriptable)"
DISTINCT_KEYS = "keys with distinct string forms"

_MISSING = object()


def _index_keys(data: Any, keys: Any) -> dict[str, Any]:
    index = {str(k): k for k in keys}
    if len(index) != len(keys):
        raise TypeMismatch(data, DISTINCT_KEYS)
    return index


class KeyedPayload:
    legacy = False

    def __init__(self) -> None:
        self._index: dict[str, Any] = {}

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._index)

    def keys(self) -> list[str]:
        return list(self._index)

    def items(self) -> list[tuple[Any, Any]]:
        raise NotImplementedError

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def has(self, key: str) -> bool:
        return str(key) in self._index and self.get(key) is not None

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def unwrap(self) -> Any:
        raise NotImplementedError


class MappingPayload(KeyedPayload):
    """Owns a ``dict`` copy of a mapping or sequence payload."""

    def __init__(self, data: Mapping | list | tuple | None = None):
        super().__init__()
        if data is None:
            self._data: dict[Any, Any] = {}
        elif isinstance(data, Mapping):
            self._data = dict(data)
        else:
            self._data = dict(enumerate(data))
        self._index = _index_keys(data, self._data)

    def items(self) -> list[tuple[Any, Any]]:
        return list(self._data.items())

    def get(self, key: str) -> Any:
        k = self._index.get(str(key), _MISSING)
        if k is _MISSING:
            return None
        return self._data.get(k)

    def delete(self, key: str) -> None:
        k = self._index.pop(str(key), _MISSING)
        if k is not _MISSING:
            self._data.pop(k, None)

    def set(self, key: Any, value: Any) -> None:
        k = self._index.setdefault(str(key), key)
        self._data[k] = value

    def unwrap(self) -> dict[Any, Any]:
        return self._data


class LegacyPayload(KeyedPayload):
    """Reads and mutates an iterable, subscriptable object in place."""

    legacy = True

    def __init__(self, obj: Any):
        super().__init__()
        self._obj = obj
        self._index = _index_keys(obj, list(obj))

    def items(self) -> list[tuple[Any, Any]]:
        return [(k, self._obj[k]) for k in list(self._index.values())]

    def get(self, key: str) -> Any:
        if str(key) not in self._index:
            return None
        try:
            return self._obj[self._index[str(key)]]
        except (KeyError, IndexError):
            return None

    def delete(self, key: str) -> None:
        if str(key) not in self._index:
            return
        k = self._index.pop(str(key))
        try:
            del self._obj[k]
        except (KeyError, IndexError):
            pass

    def unwrap(self) -> Any:
        return self._obj


def is_legacy(data: Any) -> bool:
    if data is None or isinstance(data, (str, bytes, bytearray, Mapping, list, tuple)):
        return False
    cls = type(data)
    return hasattr(cls, "__iter__") and hasattr(cls, "__getitem__")


def _view(data: Any) -> KeyedPayload | None:
    if data is None or isinstance(data, (Mapping, list, tuple)):
        return MappingPayload(data)
    if is_legacy(data):
        return LegacyPayload(data)
    return None


def wrap(data: Any) -> KeyedPayload | None:
    """Return a view over ``data``, or None if it cannot be read as keyed rows."""
    try:
        return _view(data)
    except TypeMismatch:
        return None


def coerce(data: Any) -> KeyedPayload:
    """Like :func:`wrap`, but unreadable data raises :class:`TypeMismatch`."""
    payload = _view(data)
    if payload is None:
        raise TypeMismatch(data, EXPECTED_SHAPE)
    return payload
