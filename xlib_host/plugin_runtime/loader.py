from __future__ import annotations
"""Library loader.

Loads a bundle all-or-nothing: the descriptor is read, every declared
package is resolved, validated and initialised in descriptor order, and
only a fully built library reaches the registry. Any failure disposes the
packages already initialised, releases the library's code source and
surfaces as one ``LibraryLoadFailed``.
"""
import logging
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from xlib_host.core.errors import (
    BundleNotLoaded,
    DuplicateBundleName,
    LibraryLoadFailed,
    PreconditionError,
    XLibError,
)
from xlib_host.dispatch.registry import LibraryRegistry
from xlib_host.external.interface import ExternalInterface
from xlib_host.models.library import DisposeFailure, Library, Package
from .bundle import BundleFile, derive_library_name, looks_like_library, open_bundle, resolve_bundle_path
from .code_source import CodeSource
from .descriptor import check_host_version, read_descriptor
from .introspect import introspect_package

_log = logging.getLogger(__name__)


@dataclass
class DirectoryLoadResult:
    directory: Path
    loaded: List[str] = field(default_factory=list)
    failed: Dict[str, XLibError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def _dispose_packages(library_name: str, packages: List[Package]) -> List[DisposeFailure]:
    """Run dispose hooks in order; a failing hook never blocks its siblings."""
    failures: List[DisposeFailure] = []
    for package in packages:
        try:
            package.dispose()
        except Exception as e:  # noqa: BLE001
            tb = traceback.format_exc()
            _log.error("dispose failed library=%s package=%s", library_name, package.identifier, exc_info=True)
            failures.append(DisposeFailure(library=library_name, package=package.identifier, error=e, trace=tb))
    return failures


class LibraryLoader:
    """Builds libraries from bundles and keeps the registry in step."""

    def __init__(self, registry: LibraryRegistry, interface: ExternalInterface, *, host_version: str):
        self._registry = registry
        self._interface = interface
        self._host_version = host_version

    @property
    def host_version(self) -> str:
        return self._host_version

    def load(self, path: str | Path) -> Library:
        """Load the bundle at ``path``; loading an already loaded path is a no-op."""
        if path is None or (isinstance(path, str) and not path.strip()):
            raise PreconditionError("library path can not be empty")
        resolved = resolve_bundle_path(path)
        existing = self._registry.find_library_by_path(resolved)
        if existing is not None:
            _log.debug("library already loaded path=%s", resolved)
            return existing
        name = derive_library_name(resolved)
        clash = self._registry.find_library_by_name(name)
        if clash is not None:
            raise DuplicateBundleName(name, resolved, clash.path)
        bundle = open_bundle(resolved)
        library = self._build(bundle, name)
        self._registry.add(library)
        _log.info(
            "library loaded name=%s packages=%d commands=%d functions=%d",
            name,
            len(library.packages),
            sum(len(p.commands) for p in library.packages),
            sum(len(p.functions) for p in library.packages),
        )
        return library

    def _build(self, bundle: BundleFile, name: str) -> Library:
        identifier: Optional[str] = None
        code_source: Optional[CodeSource] = None
        packages: List[Package] = []
        try:
            descriptor = read_descriptor(bundle)
            check_host_version(descriptor, self._host_version)
            code_source = CodeSource(name, bundle.path, is_archive=bundle.is_archive)
            for identifier in descriptor.packages:
                packages.append(introspect_package(identifier, code_source, self._interface))
        except BaseException as e:  # noqa: BLE001 - rollback also runs on interrupts
            _log.warning("library load failed name=%s package=%s: %r", name, identifier, e)
            # Packages already initialised get their dispose hook before the source goes away.
            _dispose_packages(name, packages)
            if code_source is not None:
                code_source.release()
            if not isinstance(e, Exception):
                raise
            raise LibraryLoadFailed(bundle.path, identifier, e) from e
        return Library(
            name=name,
            path=bundle.path,
            code_source=code_source,
            packages=packages,
            requires=descriptor.requires,
        )

    def unload(self, name_or_path: str | Path) -> List[DisposeFailure]:
        """Unload by path or name. Dispose failures are reported, not raised."""
        if name_or_path is None or (isinstance(name_or_path, str) and not name_or_path.strip()):
            raise PreconditionError("library name or path can not be empty")
        library = self._registry.find_library(name_or_path)
        if library is None:
            raise BundleNotLoaded(str(name_or_path))
        self._registry.remove(library)
        failures = _dispose_packages(library.name, library.packages)
        library.code_source.release()
        library.packages.clear()
        _log.info("library unloaded name=%s dispose_failures=%d", library.name, len(failures))
        return failures

    def reload(self, name_or_path: str | Path) -> Library:
        """Unload and load the same bundle again; it moves to the end of load order."""
        library = self._registry.find_library(name_or_path) if name_or_path else None
        if library is None:
            raise BundleNotLoaded(str(name_or_path))
        path = library.path
        self.unload(path)
        return self.load(path)

    def unload_all(self) -> List[DisposeFailure]:
        failures: List[DisposeFailure] = []
        for library in reversed(self._registry.libraries()):
            failures.extend(self.unload(library.path))
        return failures

    def load_directory(self, directory: str | Path, *, strict: bool = False) -> DirectoryLoadResult:
        """Load every bundle found directly in ``directory``, sorted by name.

        Best effort unless ``strict``: a failing bundle is logged and recorded
        while the rest still load.
        """
        root = resolve_bundle_path(directory)
        result = DirectoryLoadResult(directory=root)
        if not root.is_dir():
            _log.warning("library directory missing path=%s", root)
            return result
        for candidate in sorted(root.iterdir(), key=lambda p: p.name):
            if not looks_like_library(candidate):
                continue
            try:
                library = self.load(candidate)
            except XLibError as e:
                if strict:
                    raise
                _log.error("library load failed path=%s", candidate, exc_info=True)
                result.failed[str(candidate)] = e
                continue
            result.loaded.append(library.name)
        return result
