from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pipehub.core.contracts import (
    AsyncErrorHandler,
    ClientConfig,
    ClientConfigHost,
    ClientConfigServer,
    ClientConfigServerAction,
    ClientConfigServerHTTP,
    GenerateConfig,
    GenerateConfigPipe,
)
from pipehub.core.duration import parse_duration
from pipehub.core.lifecycle import ShutdownContext
from pipehub.models.config import Config


def to_generate_config(cfg: Config) -> GenerateConfig:
    return GenerateConfig(
        pipes=tuple(
            GenerateConfigPipe(
                alias=pipe.alias,
                path=pipe.import_path,
                module=pipe.module,
                version=pipe.version,
            )
            for pipe in cfg.pipes
        )
    )


def to_client_config(cfg: Config, async_error_handler: AsyncErrorHandler) -> ClientConfig:
    """Flatten hosts and the single server block into the runtime client config.

    Without a server block (or without its ``http`` / ``action`` sub-blocks)
    the zero values apply: port 0 and empty action handlers.
    """
    hosts = tuple(ClientConfigHost(endpoint=h.endpoint, handler=h.handler) for h in cfg.hosts)

    http = ClientConfigServerHTTP()
    action = ClientConfigServerAction()
    server = cfg.server
    if server is not None:
        if server.action:
            action = ClientConfigServerAction(
                not_found=server.action[0].not_found,
                panic=server.action[0].panic,
            )
        if server.http:
            http = ClientConfigServerHTTP(port=server.http[0].port)

    return ClientConfig(
        hosts=hosts,
        server=ClientConfigServer(http=http, action=action),
        async_error_handler=async_error_handler,
    )


def graceful_shutdown_timeout(cfg: Config) -> Optional[timedelta]:
    """Parsed ``server.graceful-shutdown``; ``None`` when absent or empty.

    Raises:
        DurationParseError: if the literal is malformed.
    """
    server = cfg.server
    if server is None or server.graceful_shutdown == "":
        return None
    return parse_duration(server.graceful_shutdown)


def to_shutdown_context(cfg: Config) -> ShutdownContext:
    """Cancellation handle for stopping the runtime.

    The deadline starts counting when this is called, so call it once the stop
    has been requested.
    """
    timeout = graceful_shutdown_timeout(cfg)
    if timeout is None:
        return ShutdownContext.background()
    return ShutdownContext.with_timeout(timeout.total_seconds())
