from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pipehub.core.exceptions import DecodeError
from pipehub.core.logger import get_logger
from pipehub.core.node import GenericNode, MappingList, Scalar, describe
from pipehub.models.config import Config, PipeConfig

logger = get_logger(__name__)

# Document key -> PipeConfig field, everything but the label field.
_PIPE_OPTIONS: Dict[str, str] = {
    (info.alias or name): name
    for name, info in PipeConfig.model_fields.items()
    if name != PipeConfig.LABEL_FIELD
}


def fill_empty_pipe_bodies(document: Any) -> Any:
    """Give every option-less pipe one empty body.

    In YAML a pipe declared without options (``- github.com/pipehub/sample:``)
    parses to a null body, which the node conversion would drop as an absent
    key. It is rewritten to ``[{}]`` so the pipe survives with empty options.
    Works on plain parsed data; anything that is not the expected shape is
    passed through for :func:`decode_pipes` to report.
    """
    if not isinstance(document, dict) or not isinstance(document.get("pipe"), list):
        return document

    pipes = []
    for outer in document["pipe"]:
        if isinstance(outer, dict):
            outer = {label: ([{}] if body is None else body) for label, body in outer.items()}
        pipes.append(outer)
    return {**document, "pipe": pipes}


def decode_pipes(raw: Optional[GenericNode]) -> Tuple[PipeConfig, ...]:
    """Decode the raw value bound to the ``pipe`` key.

    Expects the shape a repeated, labeled block collapses into::

        MappingList([
            Mapping({"github.com/pipehub/sample": MappingList([
                Mapping({"version": Scalar("v0.7.0"), "alias": Scalar("base")}),
            ])}),
        ])

    The label becomes ``import_path``; the inner keys are plain string fields.
    Unknown inner keys are rejected so a mistyped version pin cannot slip
    through unnoticed.
    """
    if raw is None:
        return ()

    if not isinstance(raw, MappingList):
        raise DecodeError("pipe", f"expected mapping list, got {describe(raw)}")

    result: List[PipeConfig] = []
    for outer_index, outer in enumerate(raw):
        for label, inner in outer.items():
            path = f"pipe[{outer_index}].{label}"
            if not label:
                raise DecodeError(f"pipe[{outer_index}]", "pipe label (import path) must not be empty")
            if not isinstance(inner, MappingList):
                raise DecodeError(path, f"expected mapping list, got {describe(inner)}")
            if not len(inner):
                raise DecodeError(path, "pipe body must hold at least one block")

            for inner_index, entry in enumerate(inner):
                values: Dict[str, str] = {PipeConfig.LABEL_FIELD: label}
                for key, value in entry.items():
                    key_path = f"{path}[{inner_index}].{key}"
                    field_name = _PIPE_OPTIONS.get(key)
                    if field_name is None:
                        raise DecodeError(
                            key_path,
                            f"unknown pipe key '{key}', expected one of {sorted(_PIPE_OPTIONS)}",
                        )
                    if not (isinstance(value, Scalar) and isinstance(value.value, str)):
                        raise DecodeError(key_path, f"expected string, got {describe(value)}")
                    values[field_name] = value.value
                result.append(PipeConfig(**values))

    logger.debug(f"Decoded {len(result)} pipe block(s)")
    return tuple(result)


def merge_pipes(cfg: Config, pipes: Tuple[PipeConfig, ...]) -> Config:
    """Return a copy of ``cfg`` carrying the recovered pipe blocks."""
    return cfg.model_copy(update={"pipes": tuple(pipes)})
