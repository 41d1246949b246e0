"""Public API for package authors: the engine callback surface and the
operation declaration builder."""
from xlib_host.external.interface import ControlRef, ExternalInterface, SearchModifier
from xlib_host.external.operations import (
    OperationDecl,
    OperationKind,
    OperationTable,
    ParameterKind,
    ReturnKind,
)

__all__ = [
    "ControlRef",
    "ExternalInterface",
    "SearchModifier",
    "OperationDecl",
    "OperationKind",
    "OperationTable",
    "ParameterKind",
    "ReturnKind",
]
