"""
Runtime contract of generated Python bindings.

Generated binding modules import everything they reference from here: the
metadata records, the global enum registry, the view updater hook, the
change event and the abstract model contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class BindableType(Enum):
    """Value category of a bound property."""

    INT = "Int"
    FLOAT = "Float"
    BOOL = "Bool"
    STRING = "String"
    OPAQUE_RESOURCE = "OpaqueResource"
    ENUM = "Enum"
    FLAGS_ENUM = "FlagsEnum"
    LIST_INT = "ListInt"
    LIST_FLOAT = "ListFloat"
    LIST_BOOL = "ListBool"
    LIST_STRING = "ListString"
    LIST_OPAQUE_RESOURCE = "ListOpaqueResource"
    LIST_ENUM = "ListEnum"
    UNSUPPORTED = "Unsupported"


@dataclass(frozen=True)
class BindablePropertyInfo:
    bind_type: BindableType
    property_name: str
    type_full_name: str


@dataclass(frozen=True)
class BindableTypeInfo:
    """Static metadata table of a bindable type."""

    type_name: str
    type_full_name: str
    properties: tuple[BindablePropertyInfo, ...] = ()

    def get_property(self, property_name: str) -> BindablePropertyInfo | None:
        for prop in self.properties:
            if prop.property_name == property_name:
                return prop
        return None

    @property
    def property_names(self) -> list[str]:
        return [p.property_name for p in self.properties]


# Locale of an alias declared without one
NO_LOCALE = "None"


@dataclass(frozen=True)
class AliasInfo:
    language: str = NO_LOCALE
    alias: str = ""


@dataclass(frozen=True)
class EnumValueInfo:
    int_value: int
    string_value: str
    enum_value: Any = None
    aliases: tuple[AliasInfo, ...] = ()

    def get_alias(self, language: str = NO_LOCALE) -> str | None:
        for alias in self.aliases:
            if alias.language == language:
                return alias.alias
        return None


@dataclass(frozen=True)
class EnumInfo:
    type_full_name: str
    values: tuple[EnumValueInfo, ...] = ()

    def get_value(self, int_value: int) -> EnumValueInfo | None:
        for value in self.values:
            if value.int_value == int_value:
                return value
        return None


@dataclass
class EnumRegistry:
    """Enum metadata registered by generated bindings, keyed by full name."""

    infos: dict[str, EnumInfo] = field(default_factory=dict)

    def add_enum_info(self, info: EnumInfo) -> None:
        self.infos[info.type_full_name] = info

    def get_enum_info(self, type_full_name: str) -> EnumInfo | None:
        return self.infos.get(type_full_name)

    def __contains__(self, type_full_name: str) -> bool:
        return type_full_name in self.infos


enums = EnumRegistry()


class ViewUpdater(Protocol):
    """Receives every value pushed by a changing property."""

    def update_ui(self, model: Any, property_name: str, value: Any) -> None: ...


class ModelSink(Protocol):
    """Receives values pushed by ``push_all`` and ``push_one``."""

    def update_ui(self, property_name: str, value: Any) -> None: ...


class _NullUpdater:
    def update_ui(self, model: Any, property_name: str, value: Any) -> None:
        pass


_updater: ViewUpdater = _NullUpdater()


def set_updater(updater: ViewUpdater | None) -> ViewUpdater:
    """Install the process-wide view updater.

    Args:
        updater: The new updater, or None to restore the no-op default

    Returns:
        The previously installed updater
    """
    global _updater
    previous = _updater
    _updater = updater if updater is not None else _NullUpdater()
    return previous


def get_updater() -> ViewUpdater:
    return _updater


ChangeHandler = Callable[[str, Any, Any], None]


class ChangeEvent:
    """Multicast property change event.

    Handlers are called with ``(property_name, sender, old_value)``.
    Supports ``event += handler`` and ``event -= handler``.
    """

    def __init__(self):
        self._handlers: list[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: ChangeHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def __iadd__(self, handler: ChangeHandler) -> ChangeEvent:
        self.subscribe(handler)
        return self

    def __isub__(self, handler: ChangeHandler) -> ChangeEvent:
        self.unsubscribe(handler)
        return self

    def __call__(self, property_name: str, sender: Any, old_value: Any) -> None:
        for handler in list(self._handlers):
            handler(property_name, sender, old_value)

    def __len__(self) -> int:
        return len(self._handlers)


class ChangeEventSlot:
    """Class attribute giving every instance its own ChangeEvent.

    The event is created on first access and stored on the instance. A
    subclass redeclaring the slot still sees the same per-instance event.
    """

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        event = instance.__dict__.get(self.name)
        if event is None:
            event = instance.__dict__[self.name] = ChangeEvent()
        return event


class NotifyingModel(ABC):
    """Contract of models whose properties push changes by name."""

    @abstractmethod
    def update_model_int(self, property_name: str, property_value: int) -> None:
        """Set an int or enum property by name."""

    @abstractmethod
    def update_model_float(self, property_name: str, property_value: float) -> None:
        """Set a float property by name."""

    @abstractmethod
    def update_model_str(self, property_name: str, property_value: str) -> None:
        """Set a string property by name."""

    @abstractmethod
    def update_model_bool(self, property_name: str, property_value: bool) -> None:
        """Set a bool property by name."""

    @abstractmethod
    def push_all(self, sink: ModelSink) -> None:
        """Push the current value of every generated property to a sink."""

    def update_model(self, property_name: str, property_value: Any) -> None:
        """Set a property by name, routing on the runtime type of the value."""
        # bool is a subclass of int and must be checked first
        if isinstance(property_value, bool):
            self.update_model_bool(property_name, property_value)
        elif isinstance(property_value, int):
            self.update_model_int(property_name, property_value)
        elif isinstance(property_value, float):
            self.update_model_float(property_name, property_value)
        elif isinstance(property_value, str):
            self.update_model_str(property_name, property_value)
        else:
            raise TypeError(f"Cannot route value of type {type(property_value).__name__} for '{property_name}'")


class BindableModel(NotifyingModel):
    """Full binding contract: metadata plus selective pushes."""

    @property
    @abstractmethod
    def type_info(self) -> BindableTypeInfo:
        """Static metadata table of the model's type."""

    @abstractmethod
    def push_one(self, property_name: str, sink: ModelSink) -> None:
        """Push the current value of one generated property to a sink."""
