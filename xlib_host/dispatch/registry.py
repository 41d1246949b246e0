from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from xlib_host.models.library import Command, Function, Library, Package


@dataclass(frozen=True)
class RegistrySnapshot:
    """Name maps projected from the ordered library list.

    Never mutated; a load or unload builds a new snapshot and swaps it in.
    """

    libraries: Tuple[Library, ...] = ()
    by_name: Mapping[str, Library] = field(default_factory=lambda: MappingProxyType({}))
    by_path: Mapping[str, Library] = field(default_factory=lambda: MappingProxyType({}))
    packages: Mapping[str, Package] = field(default_factory=lambda: MappingProxyType({}))
    commands: Mapping[str, Command] = field(default_factory=lambda: MappingProxyType({}))
    functions: Mapping[str, Function] = field(default_factory=lambda: MappingProxyType({}))


def rebuild(libraries: Iterable[Library]) -> RegistrySnapshot:
    """Project libraries into name maps.

    Libraries are walked in load order, packages in descriptor order and
    operations in declaration order; on a name collision the later entry
    overwrites the earlier one, so the last loaded library wins.
    """
    ordered = tuple(libraries)
    by_name: Dict[str, Library] = {}
    by_path: Dict[str, Library] = {}
    packages: Dict[str, Package] = {}
    commands: Dict[str, Command] = {}
    functions: Dict[str, Function] = {}
    for library in ordered:
        by_name[library.name] = library
        by_path[library.key] = library
        for package in library.packages:
            packages[package.identifier] = package
            for command in package.commands:
                commands[command.name] = command
            for function in package.functions:
                functions[function.name] = function
    return RegistrySnapshot(
        libraries=ordered,
        by_name=MappingProxyType(by_name),
        by_path=MappingProxyType(by_path),
        packages=MappingProxyType(packages),
        commands=MappingProxyType(commands),
        functions=MappingProxyType(functions),
    )


class LibraryRegistry:
    """Loaded libraries in load order plus the derived lookup snapshot.

    Not thread-safe; callers serialize add/remove/lookups.
    """

    def __init__(self):
        self._snapshot = RegistrySnapshot()

    @property
    def snapshot(self) -> RegistrySnapshot:
        return self._snapshot

    def add(self, library: Library) -> None:
        libraries = [lib for lib in self._snapshot.libraries if lib.key != library.key]
        libraries.append(library)
        self._snapshot = rebuild(libraries)

    def remove(self, library: Library) -> None:
        libraries = [lib for lib in self._snapshot.libraries if lib is not library]
        self._snapshot = rebuild(libraries)

    def clear(self) -> None:
        self._snapshot = RegistrySnapshot()

    # -- lookups ------------------------------------------------------------

    def libraries(self) -> List[Library]:
        return list(self._snapshot.libraries)

    def find_library(self, name_or_path: str | Path) -> Optional[Library]:
        """Resolve by path first (as given, then absolute), then by name."""
        snap = self._snapshot
        raw = str(name_or_path)
        found = snap.by_path.get(raw)
        if found is not None:
            return found
        try:
            absolute = str(Path(raw).expanduser().resolve())
        except (OSError, RuntimeError):
            absolute = None
        if absolute is not None:
            found = snap.by_path.get(absolute)
            if found is not None:
                return found
        return snap.by_name.get(raw)

    def find_library_by_path(self, path: Path) -> Optional[Library]:
        return self._snapshot.by_path.get(str(path))

    def find_library_by_name(self, name: str) -> Optional[Library]:
        return self._snapshot.by_name.get(name)

    def find_package(self, identifier: str) -> Optional[Package]:
        return self._snapshot.packages.get(identifier)

    def find_command(self, name: str) -> Optional[Command]:
        return self._snapshot.commands.get(name)

    def find_function(self, name: str) -> Optional[Function]:
        return self._snapshot.functions.get(name)

    def library_names(self) -> List[str]:
        return list(self._snapshot.by_name.keys())

    def package_names(self) -> List[str]:
        return list(self._snapshot.packages.keys())

    def command_names(self) -> List[str]:
        return list(self._snapshot.commands.keys())

    def function_names(self) -> List[str]:
        return list(self._snapshot.functions.keys())
