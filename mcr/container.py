"""In-memory reference container for collection rows.

Stands in for the host form framework's compound form: an ordered set of
named child fields. Every ``add``/``remove`` is recorded in ``effects`` so
callers can observe exactly what a lifecycle handler did.
"""
from __future__ import annotations

from collections.abc import Collection
from typing import Any, Iterator

from .settings import settings


def is_empty_value(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, Collection) and not isinstance(value, (str, bytes)):
        return len(value) == 0
    return False


class Row:
    """One child field: a kind, its options, mapped data and nested children."""

    def __init__(self, name: str, kind: Any, options: dict[str, Any] | None = None):
        self.name = name
        self.kind = kind
        self.options: dict[str, Any] = dict(options or {})
        self.mapped: bool = bool(self.options.get("mapped", True))
        self.data: Any = self.options.get("data")
        self.children: dict[str, Row] = {}

    def __repr__(self) -> str:
        return f"Row(name={self.name!r}, kind={self.kind!r}, prototype={self.prototype_name!r})"

    def __getitem__(self, name: str) -> "Row":
        return self.children[name]

    def has(self, name: str) -> bool:
        return name in self.children

    def add(self, name: str, kind: Any, options: dict[str, Any] | None = None) -> "Row":
        child = Row(name, kind, options)
        self.children[name] = child
        return child

    def is_empty(self) -> bool:
        # Unmapped children (like the prototype marker) never hold submitted data.
        for child in self.children.values():
            if child.mapped and not child.is_empty():
                return False
        return is_empty_value(self.data)

    @property
    def prototype_name(self) -> str | None:
        marker = self.children.get(settings.prototype_field)
        return marker.data if marker else None


class FormContainer:
    def __init__(self, name: str = "collection") -> None:
        self.name = name
        self._children: dict[str, Row] = {}
        self._data: Any = None
        self.effects: list[tuple[str, str]] = []

    def __iter__(self) -> Iterator[tuple[str, Row]]:
        # Iterate over a snapshot so handlers may add/remove while looping.
        return iter(list(self._children.items()))

    def __len__(self) -> int:
        return len(self._children)

    def __contains__(self, key: object) -> bool:
        return str(key) in self._children

    def __getitem__(self, key: str) -> Row:
        return self._children[str(key)]

    def keys(self) -> list[str]:
        return list(self._children)

    def has(self, key: str) -> bool:
        return str(key) in self._children

    def add(self, key: str, kind: Any, options: dict[str, Any] | None = None) -> Row:
        key = str(key)
        row = Row(key, kind, options)
        self._children[key] = row
        self.effects.append(("add", key))
        return row

    def remove(self, key: str) -> None:
        key = str(key)
        if self._children.pop(key, None) is not None:
            self.effects.append(("remove", key))

    def get_data(self) -> Any:
        return self._data

    def set_data(self, data: Any) -> None:
        self._data = data

    def describe(self) -> list[dict[str, Any]]:
        return [{"key": key, "prototype": row.prototype_name, "data": row.data} for key, row in self]
