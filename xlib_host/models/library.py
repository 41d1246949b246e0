from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from xlib_host.external.operations import ParameterKind, ReturnKind

if TYPE_CHECKING:
    from xlib_host.plugin_runtime.code_source import CodeSource


@dataclass(slots=True)
class Command:
    name: str
    handler: Callable[..., Any]
    parameters: ParameterKind
    returns: ReturnKind
    package: str = ''


@dataclass(slots=True)
class Function:
    name: str
    handler: Callable[..., Any]
    parameters: ParameterKind
    package: str = ''

    @property
    def returns(self) -> ReturnKind:
        return ReturnKind.STRING


@dataclass(slots=True)
class Package:
    identifier: str
    instance: Any
    init_hook: Optional[Callable[[Any], None]] = None
    dispose_hook: Optional[Callable[[], None]] = None
    commands: List[Command] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)

    def init(self, interface: Any) -> None:
        if self.init_hook is not None:
            self.init_hook(interface)

    def dispose(self) -> None:
        if self.dispose_hook is not None:
            self.dispose_hook()


@dataclass(slots=True)
class Library:
    """A loaded bundle. Owns its packages and its code source exclusively."""

    name: str
    path: Path
    code_source: 'CodeSource'
    packages: List[Package] = field(default_factory=list)
    requires: Optional[str] = None

    @property
    def key(self) -> str:
        return str(self.path)


@dataclass(slots=True)
class DisposeFailure:
    """A dispose hook that raised during unload; the unload still completed."""

    library: str
    package: str
    error: BaseException
    trace: str
