"""Error taxonomy for library loading, dispatch and engine callbacks.

Load-time errors are all-or-nothing: when one of them escapes a load, no
package of the offending library is registered. Invocation errors keep the
"name not registered" case apart from "the operation ran and failed".
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class XLibError(Exception):
    """Base class for every error raised by xlib_host."""


class PreconditionError(XLibError, ValueError):
    """An argument had the wrong shape (None, empty, wrong type, bad id)."""


class ExternalError(XLibError):
    """The engine could not locate or change the requested target."""


# -----------------------------------------------------------------------------
# Load time
# -----------------------------------------------------------------------------

class LoadError(XLibError):
    pass


class InvalidBundleFile(LoadError):
    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"'{self.path}' is not a valid library bundle: {reason}")


class DuplicateBundleName(LoadError):
    def __init__(self, name: str, path: str | Path, existing_path: str | Path):
        self.name = name
        self.path = str(path)
        self.existing_path = str(existing_path)
        super().__init__(
            f"a library named '{name}' was already loaded from a different path ({self.existing_path})"
        )


class DescriptorMissing(LoadError):
    pass


class DescriptorMalformed(LoadError):
    pass


class DescriptorInvalid(LoadError):
    pass


class IncompatibleLibrary(LoadError):
    def __init__(self, requires: str, host_version: str):
        self.requires = requires
        self.host_version = host_version
        super().__init__(f"library requires host {requires}, running {host_version}")


class PackageError(LoadError):
    """A load error attributed to one package identifier."""

    def __init__(self, identifier: str, message: str):
        self.identifier = identifier
        super().__init__(message)


class PackageNotFound(PackageError):
    pass


class PackageNotInstantiable(PackageError):
    pass


class PackageNotDeclared(PackageError):
    pass


class EmptyPackage(PackageError):
    pass


class SignatureError(PackageError):
    """An operation declaration does not satisfy its kind's signature rules."""

    def __init__(self, identifier: str, operation: str, message: str):
        self.operation = operation
        super().__init__(identifier, message)


class InvalidInitSignature(SignatureError):
    pass


class InvalidDisposeSignature(SignatureError):
    pass


class InvalidCommandSignature(SignatureError):
    pass


class InvalidFunctionSignature(SignatureError):
    pass


class PackageInitFailed(PackageError):
    pass


class LibraryLoadFailed(LoadError):
    """Composite error for a library whose descriptor or packages failed.

    ``identifier`` names the failing package (None when the descriptor
    itself was at fault) and ``cause`` is the underlying error.
    """

    def __init__(self, path: str | Path, identifier: Optional[str], cause: BaseException):
        self.path = str(path)
        self.identifier = identifier
        self.cause = cause
        where = f"package '{identifier}'" if identifier else "descriptor"
        super().__init__(f"library '{self.path}' could not be loaded ({where})\n{cause}")


class BundleNotLoaded(XLibError):
    def __init__(self, name_or_path: str):
        self.name_or_path = name_or_path
        super().__init__(f"there is no library '{name_or_path}' loaded")


# -----------------------------------------------------------------------------
# Invocation time
# -----------------------------------------------------------------------------

class InvocationError(XLibError):
    pass


class UnknownOperation(InvocationError):
    kind = 'operation'

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{self.kind} '{name}' is unknown")


class UnknownCommand(UnknownOperation):
    kind = 'command'


class UnknownFunction(UnknownOperation):
    kind = 'function'


class InvocationFailed(InvocationError):
    """The callee raised; ``trace`` holds its rendered traceback verbatim."""

    def __init__(self, kind: str, operation: str, trace: str):
        self.kind = kind
        self.operation = operation
        self.trace = trace
        super().__init__(f"{kind} '{operation}' encountered an exception\n{trace}")


__all__ = [
    "XLibError",
    "PreconditionError",
    "ExternalError",
    "LoadError",
    "InvalidBundleFile",
    "DuplicateBundleName",
    "DescriptorMissing",
    "DescriptorMalformed",
    "DescriptorInvalid",
    "IncompatibleLibrary",
    "PackageError",
    "PackageNotFound",
    "PackageNotInstantiable",
    "PackageNotDeclared",
    "EmptyPackage",
    "SignatureError",
    "InvalidInitSignature",
    "InvalidDisposeSignature",
    "InvalidCommandSignature",
    "InvalidFunctionSignature",
    "PackageInitFailed",
    "LibraryLoadFailed",
    "BundleNotLoaded",
    "InvocationError",
    "UnknownOperation",
    "UnknownCommand",
    "UnknownFunction",
    "InvocationFailed",
]
