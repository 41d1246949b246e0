from __future__ import annotations
"""Per-library import namespaces.

Every loaded library gets its own synthetic package
``xlib_host.libraries.<token>`` whose ``__path__`` is the bundle path (a
directory or a zip archive; the standard path hooks handle both). Package
modules are imported beneath that prefix, so two libraries shipping a
module of the same name never resolve each other's code. Inside a bundle,
sibling modules are reached with relative imports.
"""
import importlib
import logging
import sys
import types
import uuid
import zipimport
from pathlib import Path
from types import ModuleType

_log = logging.getLogger(__name__)

NAMESPACE = 'xlib_host.libraries'


def _ensure_namespace() -> ModuleType:
    mod = sys.modules.get(NAMESPACE)
    if mod is not None:
        return mod
    parent_pkg = importlib.import_module('xlib_host')
    mod = types.ModuleType(NAMESPACE)
    mod.__path__ = []  # populated per library via child modules only
    setattr(parent_pkg, 'libraries', mod)
    sys.modules[NAMESPACE] = mod
    return mod


class CodeSource:
    """Import context owned by exactly one library; released on unload."""

    def __init__(self, library_name: str, path: Path, *, is_archive: bool = False):
        self.library_name = library_name
        self.path = path
        self.is_archive = is_archive
        self.token = f"lib_{uuid.uuid4().hex[:12]}"
        self.prefix = f"{NAMESPACE}.{self.token}"
        self._released = False
        self._drop_path_caches()
        if is_archive:
            # An archive rewritten in place must not be read through a stale directory.
            try:
                zipimport.zipimporter(str(path)).invalidate_caches()
            except zipimport.ZipImportError as e:
                _log.debug("zip directory refresh failed path=%s err=%s", path, e)
        parent = _ensure_namespace()
        root = types.ModuleType(self.prefix)
        root.__path__ = [str(path)]
        root.__file__ = None
        sys.modules[self.prefix] = root
        setattr(parent, self.token, root)
        _log.debug("code source %s opened for library=%s path=%s", self.prefix, library_name, path)

    @property
    def released(self) -> bool:
        return self._released

    def import_module(self, module_path: str) -> ModuleType:
        """Import ``module_path`` (dotted, relative to the bundle root)."""
        if self._released:
            raise RuntimeError(f"code source for library '{self.library_name}' was released")
        return importlib.import_module(f"{self.prefix}.{module_path}")

    def owns(self, module_name: str) -> bool:
        return module_name == self.prefix or module_name.startswith(self.prefix + '.')

    def release(self) -> None:
        """Drop every module imported through this source and its path caches."""
        if self._released:
            return
        self._released = True
        # Collect keys first to avoid mutating while iterating
        keys = [k for k in list(sys.modules.keys()) if self.owns(k)]
        for k in keys:
            sys.modules.pop(k, None)
        parent = sys.modules.get(NAMESPACE)
        if parent is not None and hasattr(parent, self.token):
            delattr(parent, self.token)
        self._drop_path_caches()
        importlib.invalidate_caches()
        _log.debug("code source %s released (%d modules)", self.prefix, len(keys))

    def _drop_path_caches(self) -> None:
        root = str(self.path)
        for cached in [p for p in list(sys.path_importer_cache.keys()) if isinstance(p, str) and p.startswith(root)]:
            sys.path_importer_cache.pop(cached, None)
