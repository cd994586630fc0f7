from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from pipehub.bootstrap import load_builtin_plugins
from pipehub.core.contracts import AsyncErrorHandler
from pipehub.core.lifecycle import StopSignal
from pipehub.core.logger import get_logger
from pipehub.models.config import Config
from pipehub.wiring.projections import (
    graceful_shutdown_timeout,
    to_client_config,
    to_generate_config,
    to_shutdown_context,
)
from pipehub.wiring.registry import GeneratorRegistry, RuntimeRegistry

logger = get_logger(__name__)


def make_async_error_handler(stop_signal: StopSignal) -> AsyncErrorHandler:
    """Build the callback the runtime uses to report errors from background work.

    Any async error is logged and stops the process gracefully.
    """

    def _handler(err: BaseException) -> None:
        logger.error(f"async error occurred: {err}")
        stop_signal.trigger(f"async error: {err}")

    return _handler


class ServerOrchestrator:
    """
    Hands a validated configuration to the downstream subsystems.

    - ``generate``: project the plugin list and pass it to a generator.
    - ``start``: build the runtime client, wait for a stop request, then stop
      the client within the configured graceful-shutdown window.

    Example:
        >>> from pipehub.loader import load_config
        >>> cfg = load_config("pipehub.yaml")
        >>> ServerOrchestrator(cfg).generate(output=Path("build/plugins.json"))
    """

    def __init__(self, cfg: Config, *, stop_signal: Optional[StopSignal] = None):
        self.cfg = cfg
        self.stop_signal = stop_signal or StopSignal()

    def generate(self, generator: str = "json", *, output: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
        load_builtin_plugins()
        generator_fn = GeneratorRegistry.get(generator)

        generate_cfg = to_generate_config(self.cfg)
        logger.info(f"Generating with {generator!r}: pipes={len(generate_cfg.pipes)}")
        return generator_fn(generate_cfg, output=Path(output) if output is not None else None)

    def start(self, runtime: str) -> Optional[str]:
        """Run the client until a stop is requested; returns the stop reason."""
        load_builtin_plugins()
        factory = RuntimeRegistry.get(runtime)

        # Fail before starting anything if the shutdown window is malformed.
        timeout = graceful_shutdown_timeout(self.cfg)

        client_cfg = to_client_config(self.cfg, make_async_error_handler(self.stop_signal))
        client = factory(client_cfg)
        logger.info(
            f"Starting runtime {runtime!r}: hosts={len(client_cfg.hosts)}, "
            f"http_port={client_cfg.server.http.port}"
        )
        client.start()

        self.stop_signal.wait()
        logger.info(
            f"Stopping runtime {runtime!r} (reason={self.stop_signal.reason}, "
            f"graceful_shutdown={timeout if timeout is not None else 'unbounded'})"
        )

        with to_shutdown_context(self.cfg) as ctx:
            client.stop(ctx)
            if ctx.done():
                logger.warning(f"Runtime stop finished after shutdown context ended: {ctx.err()}")

        logger.info("Runtime stopped")
        return self.stop_signal.reason
