from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

# -----------------------------------------------------------------------------
# Operation declarations
# -----------------------------------------------------------------------------


class OperationKind(str, Enum):
    INIT = 'init'
    DISPOSE = 'dispose'
    COMMAND = 'command'
    FUNCTION = 'function'


class ParameterKind(str, Enum):
    NONE = 'none'
    ARRAY = 'array'


class ReturnKind(str, Enum):
    VOID = 'void'
    STRING = 'string'


@dataclass(frozen=True, slots=True)
class OperationDecl:
    kind: OperationKind
    attr: str
    alias: Optional[str] = None

    @property
    def name(self) -> str:
        # Alias validity is checked by the introspector, not here.
        return self.alias if self.alias is not None else self.attr


class OperationTable:
    """Builder handed to ``declare_operations`` on a package class.

    A package lists what it exposes, in order::

        class Greeter:
            @classmethod
            def declare_operations(cls, ops: OperationTable) -> None:
                ops.init('init')
                ops.function('hello', alias='etHello')
                ops.command('set_greeting')

    Declarations are only recorded here; signatures are checked when the
    library is loaded.
    """

    def __init__(self) -> None:
        self._decls: List[OperationDecl] = []

    def init(self, attr: str) -> 'OperationTable':
        return self._add(OperationKind.INIT, attr, None)

    def dispose(self, attr: str) -> 'OperationTable':
        return self._add(OperationKind.DISPOSE, attr, None)

    def command(self, attr: str, *, alias: Optional[str] = None) -> 'OperationTable':
        return self._add(OperationKind.COMMAND, attr, alias)

    def function(self, attr: str, *, alias: Optional[str] = None) -> 'OperationTable':
        return self._add(OperationKind.FUNCTION, attr, alias)

    def _add(self, kind: OperationKind, attr: str, alias: Optional[str]) -> 'OperationTable':
        self._decls.append(OperationDecl(kind=kind, attr=attr, alias=alias))
        return self

    def declarations(self) -> List[OperationDecl]:
        return list(self._decls)

    def __iter__(self) -> Iterator[OperationDecl]:
        return iter(self._decls)

    def __len__(self) -> int:
        return len(self._decls)
