from __future__ import annotations

import re
import typing
from typing import Any, Dict, FrozenSet, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pipehub.core.exceptions import DecodeError
from pipehub.core.logger import get_logger
from pipehub.core.node import GenericNode, Mapping, MappingList, Scalar, describe
from pipehub.models.config import Config

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_BASE10_INT = re.compile(r"[+-]?[0-9]+")


def decode_config(node: GenericNode) -> Config:
    """Decode the root document mapping into a :class:`Config`.

    ``hosts`` and ``servers`` are populated; labeled blocks (``pipe``) are left
    empty and must be decoded with :func:`pipehub.decoding.pipe_decoder.decode_pipes`.
    Unrecognized top-level keys are ignored.
    """
    cfg = decode_model(Config, node, skip=Config.LABELLED_BLOCKS)

    if isinstance(node, Mapping):
        known = {info.alias or name for name, info in Config.model_fields.items()}
        ignored = sorted(key for key, _ in node.items() if key not in known)
        if ignored:
            logger.debug(f"Ignoring unrecognized top-level keys: {ignored}")

    logger.debug(f"Decoded schema: hosts={len(cfg.hosts)}, servers={len(cfg.servers)}")
    return cfg


def decode_model(
    model_cls: Type[ModelT],
    node: GenericNode,
    *,
    path: str = "",
    skip: FrozenSet[str] = frozenset(),
) -> ModelT:
    """Decode a :class:`Mapping` into ``model_cls`` by document key.

    Each field's document key is its alias, or its name when it has none.
    Missing keys keep the field default; keys the model does not declare are
    ignored.
    """
    if not isinstance(node, Mapping):
        raise DecodeError(path or "<root>", f"expected mapping, got {describe(node)}")

    values: Dict[str, Any] = {}
    for name, info in model_cls.model_fields.items():
        key = info.alias or name
        if key in skip:
            continue
        child = node.get(key)
        if child is None:
            continue
        values[name] = _decode_value(info.annotation, child, _join(path, key))

    try:
        return model_cls.model_validate(values)
    except PydanticValidationError as exc:
        raise DecodeError(path or "<root>", str(exc)) from exc


def _decode_value(annotation: Any, node: GenericNode, path: str) -> Any:
    if annotation is str:
        return _decode_str(node, path)

    if annotation is int:
        return _decode_int(node, path)

    block_cls = _block_type(annotation)
    if block_cls is not None:
        if not isinstance(node, MappingList):
            raise DecodeError(path, f"expected mapping list, got {describe(node)}")
        return tuple(
            decode_model(block_cls, item, path=f"{path}[{index}]")
            for index, item in enumerate(node)
        )

    raise TypeError(f"Unsupported field annotation for {path!r}: {annotation!r}")


def _decode_str(node: GenericNode, path: str) -> str:
    if isinstance(node, Scalar) and isinstance(node.value, str):
        return node.value
    raise DecodeError(path, f"expected string, got {describe(node)}")


def _decode_int(node: GenericNode, path: str) -> int:
    if not isinstance(node, Scalar):
        raise DecodeError(path, f"expected integer, got {describe(node)}")
    if isinstance(node.value, int):
        return node.value
    text = node.value.strip()
    if not _BASE10_INT.fullmatch(text):
        raise DecodeError(path, f"expected base-10 integer, got {node.value!r}")
    return int(text, 10)


def _block_type(annotation: Any) -> Type[BaseModel] | None:
    """Return ``M`` for ``Tuple[M, ...]`` where ``M`` is a model, else ``None``."""
    if typing.get_origin(annotation) is not tuple:
        return None
    args: Tuple[Any, ...] = typing.get_args(annotation)
    if len(args) == 2 and args[1] is Ellipsis and isinstance(args[0], type) and issubclass(args[0], BaseModel):
        return args[0]
    return None


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key
