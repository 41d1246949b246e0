from __future__ import annotations
"""Host-facing entry point.

A host process creates one ``ExternalLoader`` around its engine binding and
drives loading, listing and dispatch through it::

    loader = ExternalLoader(engine)
    loader.load_library('/opt/libs/hello.xlib')
    loader.call_function('etHello')
"""
import logging
from pathlib import Path
from typing import List, Optional

from xlib_host.core.config import Settings, settings as default_settings
from xlib_host.core.errors import PreconditionError
from xlib_host.core.logging_config import configure_logging
from xlib_host.dispatch.invoker import Arguments, Invoker
from xlib_host.dispatch.registry import LibraryRegistry
from xlib_host.external.interface import ExternalInterface
from xlib_host.models.library import DisposeFailure, Library
from xlib_host.plugin_runtime.loader import DirectoryLoadResult, LibraryLoader

_log = logging.getLogger(__name__)


def _require_name(name: str, what: str) -> str:
    if not isinstance(name, str) or not name:
        raise PreconditionError(f"{what} name can not be empty")
    return name


class ExternalLoader:
    """Loads libraries for one engine and dispatches into them by name.

    Not thread-safe: loads, unloads and calls must be serialized by the host.
    """

    def __init__(self, interface: ExternalInterface, settings: Optional[Settings] = None):
        if not isinstance(interface, ExternalInterface):
            raise PreconditionError(f"interface must be an ExternalInterface, got {type(interface).__name__}")
        self._interface = interface
        self._settings = settings or default_settings
        configure_logging(self._settings.log_level)
        self._registry = LibraryRegistry()
        self._loader = LibraryLoader(self._registry, interface, host_version=self._settings.version)
        self._invoker = Invoker(self._registry)

    @property
    def interface(self) -> ExternalInterface:
        return self._interface

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> LibraryRegistry:
        return self._registry

    # -- lifecycle --------------------------------------------------------

    def load_library(self, path: str | Path) -> Library:
        return self._loader.load(path)

    def unload_library(self, name_or_path: str | Path) -> List[DisposeFailure]:
        return self._loader.unload(name_or_path)

    def reload_library(self, name_or_path: str | Path) -> Library:
        return self._loader.reload(name_or_path)

    def load_directory(self, directory: str | Path) -> DirectoryLoadResult:
        return self._loader.load_directory(directory)

    def autoload(self) -> Optional[DirectoryLoadResult]:
        """Load the configured library directory, if any."""
        directory = self._settings.library_dir
        if directory is None:
            _log.debug("no library directory configured; autoload skipped")
            return None
        result = self._loader.load_directory(directory, strict=self._settings.strict_autoload)
        _log.info(
            "autoload finished dir=%s loaded=%d failed=%d", result.directory, len(result.loaded), len(result.failed)
        )
        return result

    def unload_all(self) -> List[DisposeFailure]:
        return self._loader.unload_all()

    def __enter__(self) -> 'ExternalLoader':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unload_all()

    # -- listings ---------------------------------------------------------

    def list_libraries(self) -> str:
        return '\n'.join(self._registry.library_names())

    def list_packages(self) -> str:
        return '\n'.join(self._registry.package_names())

    def list_commands(self) -> str:
        return '\n'.join(self._registry.command_names())

    def list_functions(self) -> str:
        return '\n'.join(self._registry.function_names())

    # -- dispatch ---------------------------------------------------------

    def call_command(self, name: str, args: Arguments = None) -> str:
        return self._invoker.invoke_command(_require_name(name, 'command'), args)

    def call_function(self, name: str, args: Arguments = None) -> str:
        return self._invoker.invoke_function(_require_name(name, 'function'), args)
