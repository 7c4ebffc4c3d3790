from __future__ import annotations

import warnings
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Union

from . import journal
from .api_models import RowConfig
from .errors import ReconcilerError, UnknownConfig, UnknownRuntimeType
from .events import PRE_SET_DATA, PRE_SUBMIT, SUBMIT, EventDispatcher, FormEvent
from .payload import MappingPayload, coerce, wrap
from .settings import settings

# Runs after default-priority SUBMIT listeners, i.e. after the data mapper.
FINALIZE_PRIORITY = -50

LEGACY_PAYLOAD_MESSAGE = (
    "Support for payloads that are iterable and subscriptable but not mappings is deprecated "
    "and will be removed. Use a dict instead."
)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class ByRuntimeType:
    """Resolve a config name from the exact runtime class of a value.

    Keys may be classes or class names (qualified ``module.QualName`` or bare).
    Subclasses are not matched.
    """

    def __init__(self, mapping: Mapping[Any, str]):
        self._by_class = {k: v for k, v in mapping.items() if isinstance(k, type)}
        self._by_name = {(qualified_name(k) if isinstance(k, type) else str(k)): v for k, v in mapping.items()}

    def resolve(self, value: Any) -> str:
        cls = type(value)
        if cls in self._by_class:
            return self._by_class[cls]
        for name in (qualified_name(cls), cls.__qualname__, cls.__name__):
            if name in self._by_name:
                return self._by_name[name]
        raise UnknownRuntimeType(value, self._by_name)


class ByFunction:
    def __init__(self, fn: Callable[[Any], str]):
        if not callable(fn):
            raise TypeError(f"Resolver function must be callable, '{type(fn).__name__}' given")
        self.fn = fn

    def resolve(self, value: Any) -> str:
        return self.fn(value)


Resolver = Union[ByRuntimeType, ByFunction]


def as_resolver(obj: Any) -> Resolver:
    if isinstance(obj, (ByRuntimeType, ByFunction)):
        return obj
    if isinstance(obj, Mapping):
        return ByRuntimeType(obj)
    if callable(obj):
        return ByFunction(obj)
    raise TypeError(f"Resolver must be a mapping or a callable, '{type(obj).__name__}' given")


def discriminator(field: str) -> ByFunction:
    """Resolver reading the config name from ``value[field]`` (or ``value.field``)."""

    def resolve(value: Any) -> Any:
        if isinstance(value, Mapping):
            return value.get(field)
        return getattr(value, field, None)

    return ByFunction(resolve)


def _form_name(form: Any) -> str | None:
    return getattr(form, "name", None)


class CollectionReconciler:
    """Keeps a collection's rows in sync with its bound and submitted data.

    Three handlers cover one submission cycle:

      1) initialize (PRE_SET_DATA): rebuild all rows from the bound data
      2) reconcile_submitted (PRE_SUBMIT): add/remove rows to match the submitted keys
      3) finalize (SUBMIT, after mapping): drop empty rows and deleted keys from the data

    Every row gets a hidden, unmapped marker child recording the config it was built from.
    """

    def __init__(
        self,
        configs: Mapping[str, RowConfig | Mapping[str, Any]],
        pre_set_data_resolver: Mapping[Any, str] | Callable[[Any], str] | Resolver,
        pre_submit_resolver: Callable[[Any], str] | ByFunction,
        allow_add: bool = False,
        allow_delete: bool = False,
        delete_empty: bool = False,
    ):
        self.configs: Mapping[str, RowConfig] = MappingProxyType(
            {name: c if isinstance(c, RowConfig) else RowConfig.model_validate(c) for name, c in configs.items()}
        )
        self.pre_set_data_resolver = as_resolver(pre_set_data_resolver)
        self.pre_submit_resolver = (
            pre_submit_resolver if isinstance(pre_submit_resolver, ByFunction) else ByFunction(pre_submit_resolver)
        )
        self.allow_add = bool(allow_add)
        self.allow_delete = bool(allow_delete)
        self.delete_empty = bool(delete_empty)

    def subscribed_events(self) -> dict[str, tuple[Callable[[FormEvent], None], int]]:
        return {
            PRE_SET_DATA: (self.initialize, 0),
            PRE_SUBMIT: (self.reconcile_submitted, 0),
            SUBMIT: (self.finalize, FINALIZE_PRIORITY),
        }

    def register(self, dispatcher: EventDispatcher) -> None:
        for event_name, (listener, priority) in self.subscribed_events().items():
            dispatcher.add_listener(event_name, listener, priority)

    def initialize(self, event: FormEvent) -> None:
        form = event.get_form()
        try:
            payload = coerce(event.get_data())

            # First remove all rows
            for name in [name for name, _child in form]:
                self._remove_row(form, name)

            # Then add them again in payload order
            for key, value in payload:
                self._add_row(form, key, self.pre_set_data_resolver.resolve(value))
        except ReconcilerError as e:
            journal.log_event("ERROR", f"initialize failed: {e}", form_name=_form_name(form))
            raise

    def reconcile_submitted(self, event: FormEvent) -> None:
        form = event.get_form()
        payload = wrap(event.get_data())

        if payload is not None and payload.legacy:
            warnings.warn(LEGACY_PAYLOAD_MESSAGE, DeprecationWarning, stacklevel=2)
            journal.log_event("WARN", LEGACY_PAYLOAD_MESSAGE, form_name=_form_name(form))

        # Submitted data is client-controlled: anything unreadable means "no rows".
        if payload is None:
            payload = MappingPayload()

        try:
            if self.allow_delete:
                for name in [name for name, _child in form]:
                    if not payload.has(name):
                        self._remove_row(form, name)

            if self.allow_add:
                for key, value in payload:
                    if not form.has(str(key)):
                        self._add_row(form, key, self.pre_submit_resolver.resolve(value))
        except ReconcilerError as e:
            journal.log_event("ERROR", f"reconcile_submitted failed: {e}", form_name=_form_name(form))
            raise

    def finalize(self, event: FormEvent) -> None:
        form = event.get_form()
        try:
            # The mapper has already appended new entries; it never removes any.
            payload = coerce(event.get_data())
        except ReconcilerError as e:
            journal.log_event("ERROR", f"finalize failed: {e}", form_name=_form_name(form))
            raise

        if self.delete_empty:
            previous = wrap(form.get_data())
            if previous is None:
                previous = MappingPayload()
            for name, child in list(form):
                is_new = not previous.has(name)

                # is_new can only be true if allow_add is true
                if child.is_empty() and (is_new or self.allow_delete):
                    payload.delete(name)
                    self._remove_row(form, name)

        if self.allow_delete:
            for key in payload.keys():
                if not form.has(key):
                    payload.delete(key)

        event.set_data(payload.unwrap())

    def _add_row(self, form: Any, key: Any, config_name: Any) -> None:
        try:
            config = self.configs[config_name]
        except (KeyError, TypeError):
            raise UnknownConfig(config_name, self.configs) from None

        name = str(key)
        options = {"property_path": f"[{name}]", **config.options}
        form.add(name, config.type, options)
        form[name].add(settings.prototype_field, "hidden", {"mapped": False, "data": config_name})
        journal.log_event("DEBUG", f"Added row from config {config_name!r}", form_name=_form_name(form), row_key=name)

    def _remove_row(self, form: Any, name: str) -> None:
        form.remove(name)
        journal.log_event("DEBUG", "Removed row", form_name=_form_name(form), row_key=name)
