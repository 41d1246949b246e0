from __future__ import annotations
"""Package resolution and operation validation.

A package identifier ``examples.hello.Greeter`` names class ``Greeter`` in
module ``examples/hello.py`` of the bundle. The class lists its operations
through ``declare_operations(ops)``; each declaration is bound to a fresh
instance and checked against the signature rules of its kind before the
package's init hook runs.
"""
import inspect
import logging
import typing
from typing import Any, Callable, List, Optional, Tuple, Type

from xlib_host.core.errors import (
    EmptyPackage,
    InvalidCommandSignature,
    InvalidDisposeSignature,
    InvalidFunctionSignature,
    InvalidInitSignature,
    PackageInitFailed,
    PackageNotDeclared,
    PackageNotFound,
    PackageNotInstantiable,
    SignatureError,
)
from xlib_host.external.interface import ExternalInterface
from xlib_host.external.operations import (
    OperationDecl,
    OperationKind,
    OperationTable,
    ParameterKind,
    ReturnKind,
)
from xlib_host.models.library import Command, Function, Package
from .code_source import CodeSource

_log = logging.getLogger(__name__)

DECLARE_HOOK = 'declare_operations'

_ERRORS: dict[OperationKind, Type[SignatureError]] = {
    OperationKind.INIT: InvalidInitSignature,
    OperationKind.DISPOSE: InvalidDisposeSignature,
    OperationKind.COMMAND: InvalidCommandSignature,
    OperationKind.FUNCTION: InvalidFunctionSignature,
}

_NONE_TYPE = type(None)


# -----------------------------------------------------------------------------
# Class resolution
# -----------------------------------------------------------------------------

def resolve_package_class(identifier: str, code_source: CodeSource) -> type:
    module_path, _, class_name = identifier.rpartition('.')
    if not module_path:
        raise PackageNotFound(identifier, f"'{identifier}' does not name a module and a class")
    target = f"{code_source.prefix}.{module_path}"
    try:
        module = code_source.import_module(module_path)
    except ModuleNotFoundError as e:
        # Only a miss on the package's own module path is "not found"; a
        # missing dependency of that module means it could not be loaded.
        missing = e.name or ''
        if missing == target or target.startswith(missing + '.'):
            raise PackageNotFound(identifier, f"module '{module_path}' was not found in the library") from e
        raise PackageNotInstantiable(identifier, f"module '{module_path}' could not be imported: {e}") from e
    except Exception as e:  # noqa: BLE001 - bundle code may raise anything at import
        raise PackageNotInstantiable(identifier, f"module '{module_path}' could not be imported: {e}") from e
    cls = getattr(module, class_name, None)
    if cls is None:
        raise PackageNotFound(identifier, f"class '{class_name}' was not found in module '{module_path}'")
    if not isinstance(cls, type):
        raise PackageNotFound(identifier, f"'{identifier}' is not a class")
    return cls


def collect_declarations(identifier: str, cls: type) -> List[OperationDecl]:
    declare = getattr(cls, DECLARE_HOOK, None)
    if not callable(declare):
        raise PackageNotDeclared(identifier, f"class '{identifier}' does not define {DECLARE_HOOK}()")
    table = OperationTable()
    try:
        declare(table)
    except Exception as e:  # noqa: BLE001
        raise PackageNotDeclared(identifier, f"{DECLARE_HOOK}() of '{identifier}' failed: {e}") from e
    return table.declarations()


def instantiate(identifier: str, cls: type) -> Any:
    try:
        return cls()
    except Exception as e:  # noqa: BLE001
        raise PackageNotInstantiable(identifier, f"class '{identifier}' could not be instantiated: {e}") from e


# -----------------------------------------------------------------------------
# Signature checks
# -----------------------------------------------------------------------------

def _is_string_list(annotation: Any) -> bool:
    return typing.get_origin(annotation) is list and typing.get_args(annotation) == (str,)


def _bind(identifier: str, instance: Any, decl: OperationDecl) -> Tuple[Callable[..., Any], List[inspect.Parameter], dict]:
    error = _ERRORS[decl.kind]
    label = decl.attr if isinstance(decl.attr, str) else repr(decl.attr)
    if not isinstance(decl.attr, str) or not decl.attr:
        raise error(identifier, label, f"{decl.kind.value} declaration has no attribute name")
    if decl.alias is not None and (not isinstance(decl.alias, str) or not decl.alias.strip()):
        raise error(identifier, label, f"{decl.kind.value} '{label}' has an empty or non-string alias")
    fn = getattr(instance, decl.attr, None)
    if fn is None or not callable(fn):
        raise error(identifier, decl.name, f"{decl.kind.value} '{decl.name}' does not refer to a method of the package")
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise error(identifier, decl.name, f"{decl.kind.value} '{decl.name}' has no inspectable signature: {e}") from e
    try:
        hints = typing.get_type_hints(getattr(fn, '__func__', fn))
    except Exception as e:  # noqa: BLE001 - unresolvable forward references
        raise error(identifier, decl.name, f"{decl.kind.value} '{decl.name}' has unresolvable annotations: {e}") from e
    params = list(signature.parameters.values())
    for p in params:
        if p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            raise error(identifier, decl.name, f"{decl.kind.value} '{decl.name}' has invalid parameters")
    if 'return' not in hints:
        raise error(identifier, decl.name, f"{decl.kind.value} '{decl.name}' has no return annotation")
    return fn, params, hints


def _parameter_kind(identifier: str, decl: OperationDecl, params: List[inspect.Parameter], hints: dict) -> ParameterKind:
    if not params:
        return ParameterKind.NONE
    if len(params) == 1 and _is_string_list(hints.get(params[0].name)):
        return ParameterKind.ARRAY
    raise _ERRORS[decl.kind](identifier, decl.name, f"{decl.kind.value} '{decl.name}' has invalid parameters")


def _check_init(identifier: str, decl: OperationDecl, params, hints) -> None:
    if hints['return'] is not _NONE_TYPE:
        raise InvalidInitSignature(identifier, decl.name, f"init hook '{decl.name}' has a return type other than None")
    if len(params) != 1 or hints.get(params[0].name) is not ExternalInterface:
        raise InvalidInitSignature(
            identifier, decl.name, f"init hook '{decl.name}' must expect 1 parameter of type ExternalInterface"
        )


def _check_dispose(identifier: str, decl: OperationDecl, params, hints) -> None:
    if hints['return'] is not _NONE_TYPE:
        raise InvalidDisposeSignature(identifier, decl.name, f"dispose hook '{decl.name}' has a return type other than None")
    if params:
        raise InvalidDisposeSignature(identifier, decl.name, f"dispose hook '{decl.name}' is not allowed to expect parameters")


def build_package(identifier: str, instance: Any, declarations: List[OperationDecl]) -> Package:
    """Validate every declaration; no hook runs before the whole package passes."""
    package = Package(identifier=identifier, instance=instance)
    for decl in declarations:
        if not isinstance(decl, OperationDecl) or decl.kind not in _ERRORS:
            raise PackageNotDeclared(identifier, f"'{identifier}' declared an unknown operation {decl!r}")
        fn, params, hints = _bind(identifier, instance, decl)
        if decl.kind is OperationKind.INIT:
            if package.init_hook is not None:
                raise InvalidInitSignature(identifier, decl.name, "a package may declare only one init hook")
            _check_init(identifier, decl, params, hints)
            package.init_hook = fn
        elif decl.kind is OperationKind.DISPOSE:
            if package.dispose_hook is not None:
                raise InvalidDisposeSignature(identifier, decl.name, "a package may declare only one dispose hook")
            _check_dispose(identifier, decl, params, hints)
            package.dispose_hook = fn
        elif decl.kind is OperationKind.COMMAND:
            rt = hints['return']
            if rt is _NONE_TYPE:
                returns = ReturnKind.VOID
            elif rt is str:
                returns = ReturnKind.STRING
            else:
                raise InvalidCommandSignature(
                    identifier, decl.name, f"command '{decl.name}' has a return type other than None or str"
                )
            parameters = _parameter_kind(identifier, decl, params, hints)
            package.commands.append(Command(decl.name, fn, parameters, returns, package=identifier))
        else:
            if hints['return'] is not str:
                raise InvalidFunctionSignature(
                    identifier, decl.name, f"function '{decl.name}' has a return type other than str"
                )
            parameters = _parameter_kind(identifier, decl, params, hints)
            package.functions.append(Function(decl.name, fn, parameters, package=identifier))
    if not package.commands and not package.functions:
        raise EmptyPackage(identifier, f"package '{identifier}' exposes no commands or functions")
    return package


def introspect_package(identifier: str, code_source: CodeSource, interface: Optional[ExternalInterface]) -> Package:
    """Resolve, validate and initialise one package."""
    cls = resolve_package_class(identifier, code_source)
    declarations = collect_declarations(identifier, cls)
    instance = instantiate(identifier, cls)
    package = build_package(identifier, instance, declarations)
    if package.init_hook is not None:
        try:
            package.init(interface)
        except Exception as e:  # noqa: BLE001
            raise PackageInitFailed(identifier, f"package '{identifier}' could not be initialised: {e!r}") from e
    _log.debug(
        "package %s ready commands=%s functions=%s",
        identifier,
        [c.name for c in package.commands],
        [f.name for f in package.functions],
    )
    return package
