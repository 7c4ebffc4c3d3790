from __future__ import annotations

from typing import Any, Iterable


class ReconcilerError(Exception):
    pass


class TypeMismatch(ReconcilerError, TypeError):
    """Payload has a shape the reconciler cannot iterate."""

    def __init__(self, value: Any, expected: str):
        self.value_type = type(value).__name__
        self.expected = expected
        super().__init__(f"Expected argument of type '{expected}', '{self.value_type}' given")


class UnknownConfig(ReconcilerError, LookupError):
    def __init__(self, name: Any, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        super().__init__(f"Unknown row config {name!r}. Known configs: {', '.join(self.known) or '(none)'}")


class UnknownRuntimeType(ReconcilerError, LookupError):
    def __init__(self, value: Any, known: Iterable[str]):
        self.type_name = type(value).__qualname__
        self.known = sorted(known)
        super().__init__(f"No row config mapped for values of type '{self.type_name}'.")
