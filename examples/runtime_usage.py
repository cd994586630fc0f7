"""
Example: plugging a runtime into ServerOrchestrator.

The server runtime itself lives outside this package. It registers a factory
that receives the projected ClientConfig and returns an object with
``start()`` and ``stop(ctx)``.

Run with:
    pipehub start examples/pipehub.yaml --runtime print --plugin examples.runtime_usage
"""

import threading

from pipehub.core.contracts import ClientConfig
from pipehub.core.lifecycle import ShutdownContext
from pipehub.wiring.registry import register_runtime


class PrintClient:
    def __init__(self, cfg: ClientConfig):
        self.cfg = cfg
        self._worker = None

    def start(self) -> None:
        for host in self.cfg.hosts:
            print(f"serving {host.endpoint} -> {host.handler} on :{self.cfg.server.http.port}")
        self._worker = threading.Timer(5.0, self.cfg.async_error_handler, args=(RuntimeError("demo failure"),))
        self._worker.start()

    def stop(self, ctx: ShutdownContext) -> None:
        print(f"stopping, deadline in {ctx.remaining()} seconds")
        if self._worker is not None:
            self._worker.cancel()


@register_runtime(name="print")
def build_print_client(cfg: ClientConfig) -> PrintClient:
    return PrintClient(cfg)
