"""
Document loading and the decode -> validate pipeline.

The core only understands :data:`~pipehub.core.node.GenericNode`. This module
reads JSON or YAML documents, converts them to a node tree and runs every
decoding stage so callers get a validated :class:`~pipehub.models.config.Config`.

Example document (YAML)::

    host:
      - endpoint: google
        handler: base.Default
    server:
      - graceful-shutdown: 10s
        http:
          - port: 80
    pipe:
      - github.com/pipehub/sample:
          - version: v0.7.0
            alias: base
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pipehub.core.logger import get_logger, push_config_source, reset_config_source
from pipehub.core.node import GenericNode, Mapping, from_python
from pipehub.decoding.pipe_decoder import decode_pipes, fill_empty_pipe_bodies, merge_pipes
from pipehub.decoding.schema_decoder import decode_config
from pipehub.models.config import Config
from pipehub.models.validation import validate_config
from pipehub.wiring.projections import graceful_shutdown_timeout

logger = get_logger(__name__)


def read_document(config_path: Union[str, Path]) -> GenericNode:
    """
    Read a configuration file into a node tree.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the suffix is not .json, .yaml or .yml
        DecodeError: If the document holds values the node model cannot represent
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        if config_file.suffix == ".json":
            raw = json.load(f)
        elif config_file.suffix in (".yaml", ".yml"):
            raw = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_file.suffix}. "
                "Use .json or .yaml"
            )

    # An empty document is an empty configuration.
    if raw is None:
        raw = {}
    return from_python(fill_empty_pipe_bodies(raw))


def decode_document(node: GenericNode) -> Config:
    """Run every decoding stage on a root node and validate the result."""
    cfg = decode_config(node)
    raw_pipes = node.get("pipe") if isinstance(node, Mapping) else None
    cfg = merge_pipes(cfg, decode_pipes(raw_pipes))
    validate_config(cfg)
    # A malformed graceful-shutdown literal must stop startup, not shutdown.
    graceful_shutdown_timeout(cfg)
    return cfg


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    config_dict: Optional[Dict[str, Any]] = None,
) -> Config:
    """
    Load, decode and validate a configuration.

    Can be called with either:
    - A config file path (JSON/YAML)
    - An already-parsed config dictionary

    Raises:
        ValueError: If neither config_path nor config_dict provided
        DecodeError, ValidationError, DurationParseError: If the document is invalid
    """
    if config_dict is not None:
        source = "<dict>"
    elif config_path is not None:
        source = str(config_path)
    else:
        raise ValueError("Either config_path or config_dict must be provided")

    token = push_config_source(source)
    try:
        if config_dict is not None:
            node = from_python(fill_empty_pipe_bodies(config_dict))
            logger.info("Using provided config dictionary")
        else:
            node = read_document(config_path)
            logger.info(f"Loaded config from {config_path}")

        cfg = decode_document(node)
        logger.info(
            f"Configuration decoded: hosts={len(cfg.hosts)}, pipes={len(cfg.pipes)}, "
            f"server={'yes' if cfg.server is not None else 'no'}"
        )
        return cfg
    finally:
        reset_config_source(token)
