"""Runtime-facing configuration shapes.

These are the narrow views handed to downstream collaborators (the plugin
build step and the server runtime). They are plain frozen dataclasses so
collaborators never need to import the pydantic config models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from pipehub.core.lifecycle import ShutdownContext

AsyncErrorHandler = Callable[[BaseException], None]


@dataclass(frozen=True)
class GenerateConfigPipe:
    alias: str
    path: str                   # import path of the plugin source
    module: str = ""
    version: str = ""


@dataclass(frozen=True)
class GenerateConfig:
    pipes: Tuple[GenerateConfigPipe, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pipe": [
                {"alias": p.alias, "path": p.path, "module": p.module, "version": p.version}
                for p in self.pipes
            ]
        }


@dataclass(frozen=True)
class ClientConfigHost:
    endpoint: str = ""
    handler: str = ""


@dataclass(frozen=True)
class ClientConfigServerHTTP:
    port: int = 0


@dataclass(frozen=True)
class ClientConfigServerAction:
    not_found: str = ""
    panic: str = ""


@dataclass(frozen=True)
class ClientConfigServer:
    http: ClientConfigServerHTTP = field(default_factory=ClientConfigServerHTTP)
    action: ClientConfigServerAction = field(default_factory=ClientConfigServerAction)


def _ignore_async_error(err: BaseException) -> None:
    return None


@dataclass(frozen=True)
class ClientConfig:
    hosts: Tuple[ClientConfigHost, ...] = ()
    server: ClientConfigServer = field(default_factory=ClientConfigServer)
    # Environment-supplied, never derived from the document; excluded from equality.
    async_error_handler: AsyncErrorHandler = field(default=_ignore_async_error, compare=False)


class Client(Protocol):
    def start(self) -> None:
        ...

    def stop(self, ctx: ShutdownContext) -> None:
        ...


RuntimeFactory = Callable[[ClientConfig], Client]


class GeneratorFn(Protocol):
    def __call__(self, cfg: GenerateConfig, *, output: Optional[Path] = None) -> Dict[str, Any]:
        ...
