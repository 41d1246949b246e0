from __future__ import annotations
"""Command/function invocation by name with string-list arguments."""
import logging
import traceback
from typing import Any, Callable, List, Optional, Sequence

from xlib_host.core.errors import InvocationFailed, PreconditionError, UnknownCommand, UnknownFunction
from xlib_host.external.operations import ParameterKind, ReturnKind
from .registry import LibraryRegistry

_log = logging.getLogger(__name__)

Arguments = Optional[Sequence[str]]


def marshal_arguments(args: Arguments) -> List[str]:
    if args is None:
        return []
    if isinstance(args, (str, bytes)):
        raise PreconditionError("arguments must be a sequence of str, not a single string")
    try:
        values = list(args)
    except TypeError as e:
        raise PreconditionError(f"arguments must be a sequence of str, got {type(args).__name__}") from e
    for index, value in enumerate(values):
        if not isinstance(value, str):
            raise PreconditionError(f"argument {index} must be a str, got {type(value).__name__}")
    return values


def _call(kind: str, name: str, handler: Callable[..., Any], parameters: ParameterKind, args: Arguments) -> Any:
    # Argument shape is checked before the call so precondition errors stay
    # distinguishable from failures raised by the operation itself.
    values = marshal_arguments(args) if parameters is ParameterKind.ARRAY else None
    try:
        if values is None:
            return handler()
        return handler(values)
    except Exception as exc:  # noqa: BLE001 - every callee failure becomes InvocationFailed
        trace = traceback.format_exc()
        _log.debug("%s '%s' raised\n%s", kind, name, trace)
        raise InvocationFailed(kind, name, trace) from exc


def _expect_string(kind: str, name: str, result: Any) -> str:
    if isinstance(result, str):
        return result
    trace = f"TypeError: {kind} '{name}' returned {type(result).__name__}, expected str\n"
    raise InvocationFailed(kind, name, trace)


class Invoker:
    """Looks operations up in the current registry snapshot and calls them."""

    def __init__(self, registry: LibraryRegistry):
        self._registry = registry

    def invoke_command(self, name: str, args: Arguments = None) -> str:
        command = self._registry.find_command(name)
        if command is None:
            raise UnknownCommand(name)
        result = _call('command', name, command.handler, command.parameters, args)
        if command.returns is ReturnKind.VOID:
            return ''
        return _expect_string('command', name, result)

    def invoke_function(self, name: str, args: Arguments = None) -> str:
        function = self._registry.find_function(name)
        if function is None:
            raise UnknownFunction(name)
        result = _call('function', name, function.handler, function.parameters, args)
        return _expect_string('function', name, result)
