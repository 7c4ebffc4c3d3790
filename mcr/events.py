from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable

PRE_SET_DATA = "form.pre_set_data"
PRE_SUBMIT = "form.pre_submit"
SUBMIT = "form.submit"

Listener = Callable[["FormEvent"], None]


@dataclass
class FormEvent:
    form: Any
    data: Any = None

    def get_form(self) -> Any:
        return self.form

    def get_data(self) -> Any:
        return self.data

    def set_data(self, data: Any) -> None:
        self.data = data


class EventDispatcher:
    """Calls listeners by descending priority; equal priorities keep registration order."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[int, int, Listener]]] = defaultdict(list)
        self._seq = count()

    def add_listener(self, event_name: str, listener: Listener, priority: int = 0) -> None:
        self._listeners[event_name].append((int(priority), next(self._seq), listener))

    def listeners(self, event_name: str) -> list[Listener]:
        ordered = sorted(self._listeners.get(event_name, []), key=lambda t: (-t[0], t[1]))
        return [fn for _, _, fn in ordered]

    def dispatch(self, event_name: str, event: FormEvent) -> FormEvent:
        for fn in self.listeners(event_name):
            fn(event)
        return event
