from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from .api_models import RowConfig
from .container import FormContainer
from .events import PRE_SET_DATA, PRE_SUBMIT, SUBMIT, EventDispatcher, FormEvent
from .payload import KeyedPayload, MappingPayload, wrap
from .reconciler import CollectionReconciler


def map_submitted(form: FormContainer, submitted: KeyedPayload) -> dict[Any, Any]:
    """Copy submitted values into the mapped rows and collect the resulting data.

    Starts from the form's previous data; row values overwrite or append entries.
    Keys are never removed here.
    """
    previous = wrap(form.get_data())
    data = MappingPayload(dict(previous.items()) if previous is not None else None)
    for key, row in form:
        if not row.mapped:
            continue
        row.data = submitted.get(key)
        data.set(key, row.data)
    return data.unwrap()


class CollectionForm:
    """Reference host form: one row container driven through set-data and submit."""

    def __init__(self, name: str = "collection", dispatcher: EventDispatcher | None = None):
        self.container = FormContainer(name)
        self.dispatcher = dispatcher or EventDispatcher()
        self.submitted = False

    @property
    def name(self) -> str:
        return self.container.name

    def get_data(self) -> Any:
        return self.container.get_data()

    def set_data(self, data: Any) -> "CollectionForm":
        event = self.dispatcher.dispatch(PRE_SET_DATA, FormEvent(self.container, data))
        data = event.get_data()

        payload = wrap(data)
        if payload is not None:
            for key, row in self.container:
                if row.mapped:
                    row.data = payload.get(key)

        self.container.set_data(data)
        self.submitted = False
        return self

    def submit(self, submitted: Any) -> Any:
        if self.submitted:
            raise RuntimeError(f"Form '{self.name}' was already submitted")

        event = self.dispatcher.dispatch(PRE_SUBMIT, FormEvent(self.container, submitted))
        payload = wrap(event.get_data())
        if payload is None:
            payload = MappingPayload()

        data = map_submitted(self.container, payload)

        event = self.dispatcher.dispatch(SUBMIT, FormEvent(self.container, data))
        self.container.set_data(event.get_data())
        self.submitted = True
        return event.get_data()


def build_form(
    configs: Mapping[str, RowConfig | Mapping[str, Any]],
    pre_set_data_resolver: Any,
    pre_submit_resolver: Callable[[Any], str] | Any,
    allow_add: bool = False,
    allow_delete: bool = False,
    delete_empty: bool = False,
    name: str = "collection",
) -> tuple[CollectionForm, CollectionReconciler]:
    form = CollectionForm(name)
    reconciler = CollectionReconciler(
        configs,
        pre_set_data_resolver,
        pre_submit_resolver,
        allow_add=allow_add,
        allow_delete=allow_delete,
        delete_empty=delete_empty,
    )
    reconciler.register(form.dispatcher)
    return form, reconciler
