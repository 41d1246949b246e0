from __future__ import annotations

import logging

from xlib_host.external import ExternalInterface, OperationTable

_log = logging.getLogger(__name__)


class Greeter:
    """Greets the engine and pokes a global."""

    def __init__(self):
        self.engine: ExternalInterface | None = None

    @classmethod
    def declare_operations(cls, ops: OperationTable) -> None:
        ops.init('start')
        ops.dispose('stop')
        ops.function('hello', alias='etHello')
        ops.command('set_global', alias='etSetGlobal')
        ops.function('get_global', alias='etGetGlobal')

    def start(self, engine: ExternalInterface) -> None:
        self.engine = engine
        engine.send_message('Greeter ready')

    def stop(self) -> None:
        self.engine.send_message('Greeter disposed')
        self.engine = None

    def hello(self) -> str:
        return 'Hello, world'

    def set_global(self) -> None:
        _log.debug("setting gGlobal")
        self.engine.set_global('gGlobal', 'set by etSetGlobal')

    def get_global(self) -> str:
        return self.engine.get_global('gGlobal')
