from __future__ import annotations

from xlib_host.external import ExternalInterface, OperationTable


class Alpha:

    @classmethod
    def declare_operations(cls, ops: OperationTable) -> None:
        ops.init('start')
        ops.dispose('stop')
        ops.command('alpha')

    def start(self, engine: ExternalInterface) -> None:
        self.engine = engine
        engine.send_message('Alpha ready')

    def stop(self) -> None:
        self.engine.send_message('Alpha disposed')

    def alpha(self) -> None:
        pass
