"""Engine callback surface handed to packages in their init hook.

``ExternalInterface`` owns the argument preconditions; a concrete engine
binding only implements the protected ``_`` hooks. A hook signals "target
not found / not changed" by returning ``None`` (getters) or ``False``
(setters), or by raising ``ExternalError`` itself.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional

from xlib_host.core.errors import ExternalError, PreconditionError


class SearchModifier(str, Enum):
    """How the engine qualifies a control lookup."""

    CARD = 'card'
    BACKGROUND = 'background'
    NONE = 'none'

    @property
    def group(self) -> Optional[str]:
        # engine-side flag: search as card control / background control / unqualified
        if self is SearchModifier.CARD:
            return 'true'
        if self is SearchModifier.BACKGROUND:
            return 'false'
        return None


AddressKind = Literal['name', 'number', 'id']


@dataclass(frozen=True, slots=True)
class ControlRef:
    """A control addressed by name, positional index or short id."""

    by: AddressKind
    value: str | int

    @classmethod
    def by_name(cls, name: str) -> 'ControlRef':
        return cls('name', _require_text(name, 'name'))

    @classmethod
    def by_number(cls, index: int) -> 'ControlRef':
        if isinstance(index, bool) or not isinstance(index, int):
            raise PreconditionError(f"index must be an int, got {type(index).__name__}")
        return cls('number', index)

    @classmethod
    def by_id(cls, short_id: int) -> 'ControlRef':
        if isinstance(short_id, bool) or not isinstance(short_id, int):
            raise PreconditionError(f"short id must be an int, got {type(short_id).__name__}")
        if short_id < 1:
            raise PreconditionError("short id must be greater than 0")
        return cls('id', short_id)

    def describe(self) -> str:
        if self.by == 'name':
            return f"'{self.value}'"
        return f"{self.by} '{self.value}'"


def _require_text(value: Any, what: str, *, allow_empty: bool = False) -> str:
    if value is None:
        raise PreconditionError(f"{what} can not be None")
    if not isinstance(value, str):
        raise PreconditionError(f"{what} must be a str, got {type(value).__name__}")
    if not allow_empty and not value:
        raise PreconditionError(f"{what} can not be empty")
    return value


def _require_bytes(value: Any, what: str) -> bytes:
    if value is None:
        raise PreconditionError(f"{what} can not be None")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise PreconditionError(f"{what} must be bytes, got {type(value).__name__}")
    return bytes(value)


def _require_control(ref: Any) -> ControlRef:
    if not isinstance(ref, ControlRef):
        raise PreconditionError(f"control must be a ControlRef, got {type(ref).__name__}")
    return ref


def _require_modifier(modifier: Any) -> SearchModifier:
    if not isinstance(modifier, SearchModifier):
        raise PreconditionError(f"search modifier must be a SearchModifier, got {type(modifier).__name__}")
    return modifier


class ExternalInterface(abc.ABC):
    """Callbacks from a loaded package into the hosting engine.

    Not thread-safe: callbacks are only valid while the host is dispatching
    into the package (init hook or a command/function call).
    """

    # -- messages & expressions ------------------------------------------

    def send_message(self, message: str) -> None:
        """Send a pre-evaluated message to the engine's current target."""
        message = _require_text(message, 'message')
        if self._send_message(message) is False:
            raise ExternalError(f"Error while sending message '{message}'")

    def evaluate_expression(self, expression: str) -> str:
        """Evaluate ``expression`` in the context of the calling handler."""
        expression = _require_text(expression, 'expression')
        result = self._evaluate_expression(expression)
        if result is None:
            raise ExternalError(f"Error while evaluating expression '{expression}'")
        return result

    # -- globals & locals -------------------------------------------------

    def get_global(self, name: str) -> str:
        name = _require_text(name, 'name')
        result = self._get_global(name)
        if result is None:
            raise ExternalError(f"Error while getting global '{name}'")
        return result

    def set_global(self, name: str, value: str) -> None:
        name = _require_text(name, 'name')
        value = _require_text(value, 'value', allow_empty=True)
        if self._set_global(name, value) is False:
            raise ExternalError(f"Error while setting global '{name}' to value '{value}'")

    def get_variable(self, name: str) -> str:
        name = _require_text(name, 'name')
        result = self._get_variable(name)
        if result is None:
            raise ExternalError(f"Error while getting variable '{name}'")
        return result

    def set_variable(self, name: str, value: str) -> None:
        name = _require_text(name, 'name')
        value = _require_text(value, 'value', allow_empty=True)
        if self._set_variable(name, value) is False:
            raise ExternalError(f"Error while setting variable '{name}' to value '{value}'")

    # -- keyed & map variables --------------------------------------------

    def get_variable_bytes(self, name: str, key: str = '') -> bytes:
        """Raw bytes of ``name[key]``; the empty key addresses the plain variable."""
        name = _require_text(name, 'name')
        key = _require_text(key, 'key', allow_empty=True)
        result = self._get_variable_bytes(name, key)
        if result is None:
            raise ExternalError(f"Error while getting variable '{name}' (key '{key}')")
        return bytes(result)

    def set_variable_bytes(self, name: str, key: str, value: bytes) -> None:
        name = _require_text(name, 'name')
        key = _require_text(key, 'key', allow_empty=True)
        value = _require_bytes(value, 'value')
        if self._set_variable_bytes(name, key, value) is False:
            raise ExternalError(f"Error while setting variable '{name}' (key '{key}')")

    def get_variable_map(self, name: str) -> Dict[str, bytes]:
        """All keys of an array variable. Key order follows the engine and is not contractual."""
        name = _require_text(name, 'name')
        result = self._get_variable_map(name)
        if result is None:
            raise ExternalError(f"Error while getting variable '{name}' as map")
        return {str(k): bytes(v) for k, v in result.items()}

    def set_variable_map(self, name: str, mapping: Mapping[str, bytes]) -> None:
        name = _require_text(name, 'name')
        if mapping is None:
            raise PreconditionError("map can not be None")
        if not isinstance(mapping, Mapping):
            raise PreconditionError(f"map must be a mapping, got {type(mapping).__name__}")
        checked: Dict[str, bytes] = {}
        for key, value in mapping.items():
            checked[_require_text(key, 'map key')] = _require_bytes(value, f"map value for '{key}'")
        if self._set_variable_map(name, checked) is False:
            raise ExternalError(f"Error while setting variable '{name}' as map")

    # -- controls ---------------------------------------------------------

    def get_field_text(self, modifier: SearchModifier, control: ControlRef) -> str:
        modifier = _require_modifier(modifier)
        control = _require_control(control)
        result = self._get_field_text(modifier, control)
        if result is None:
            raise ExternalError(f"Error while getting text of field {control.describe()}")
        return result

    def set_field_text(self, modifier: SearchModifier, control: ControlRef, value: str) -> None:
        modifier = _require_modifier(modifier)
        control = _require_control(control)
        value = _require_text(value, 'value', allow_empty=True)
        if self._set_field_text(modifier, control, value) is False:
            raise ExternalError(f"Error while setting field {control.describe()} to value '{value}'")

    def repaint_image(self, modifier: SearchModifier, control: ControlRef) -> None:
        modifier = _require_modifier(modifier)
        control = _require_control(control)
        if self._repaint_image(modifier, control) is False:
            raise ExternalError(f"Error while showing image {control.describe()}")

    # -- engine hooks -----------------------------------------------------

    @abc.abstractmethod
    def _send_message(self, message: str) -> bool | None: ...

    @abc.abstractmethod
    def _evaluate_expression(self, expression: str) -> str | None: ...

    @abc.abstractmethod
    def _get_global(self, name: str) -> str | None: ...

    @abc.abstractmethod
    def _set_global(self, name: str, value: str) -> bool | None: ...

    @abc.abstractmethod
    def _get_variable(self, name: str) -> str | None: ...

    @abc.abstractmethod
    def _set_variable(self, name: str, value: str) -> bool | None: ...

    @abc.abstractmethod
    def _get_variable_bytes(self, name: str, key: str) -> bytes | None: ...

    @abc.abstractmethod
    def _set_variable_bytes(self, name: str, key: str, value: bytes) -> bool | None: ...

    @abc.abstractmethod
    def _get_variable_map(self, name: str) -> Mapping[str, bytes] | None: ...

    @abc.abstractmethod
    def _set_variable_map(self, name: str, mapping: Dict[str, bytes]) -> bool | None: ...

    @abc.abstractmethod
    def _get_field_text(self, modifier: SearchModifier, control: ControlRef) -> str | None: ...

    @abc.abstractmethod
    def _set_field_text(self, modifier: SearchModifier, control: ControlRef, value: str) -> bool | None: ...

    @abc.abstractmethod
    def _repaint_image(self, modifier: SearchModifier, control: ControlRef) -> bool | None: ...


__all__ = ["ExternalInterface", "SearchModifier", "ControlRef"]
