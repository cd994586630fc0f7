from __future__ import annotations

from typing import ClassVar, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Document keys follow the hyphenated-lowercase convention of the config
# language; each field declares its document key through its alias.


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class HostConfig(_Block):
    endpoint: str = ""
    handler: str = ""


class PipeConfig(_Block):
    """A plugin source. ``import_path`` comes from the block label, not a key."""

    LABEL_FIELD: ClassVar[str] = "import_path"

    import_path: str = Field(min_length=1)
    version: str = ""
    alias: str = ""
    module: str = ""


class ServerHTTPConfig(_Block):
    port: int = 0


class ServerActionConfig(_Block):
    not_found: str = Field(default="", alias="not-found")
    panic: str = ""


class ServerConfig(_Block):
    graceful_shutdown: str = Field(default="", alias="graceful-shutdown")  # duration literal, e.g. "10s"
    http: Tuple[ServerHTTPConfig, ...] = ()
    action: Tuple[ServerActionConfig, ...] = ()


class Config(_Block):
    """Root configuration decoded from a pipehub document.

    Blocks are kept as sequences exactly as they appear in the document;
    cardinality rules are enforced afterwards by
    :func:`pipehub.models.validation.validate_config`.
    """

    # Blocks whose label carries data; decoded by pipehub.decoding.pipe_decoder.
    LABELLED_BLOCKS: ClassVar[FrozenSet[str]] = frozenset({"pipe"})

    hosts: Tuple[HostConfig, ...] = Field(default=(), alias="host")
    pipes: Tuple[PipeConfig, ...] = Field(default=(), alias="pipe")
    servers: Tuple[ServerConfig, ...] = Field(default=(), alias="server")

    @property
    def server(self) -> Optional[ServerConfig]:
        return self.servers[0] if self.servers else None
