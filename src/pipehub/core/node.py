"""Untyped document tree produced by parsing a configuration document.

A parsed document is a closed variant of three node kinds:

- :class:`Scalar`: a string or integer literal.
- :class:`Mapping`: string keys to nodes, keys unique.
- :class:`MappingList`: an ordered sequence of mappings (a repeated block).

Repeated, labeled blocks such as::

    pipe "github.com/pipehub/sample" {
      version = "v0.7.0"
    }

arrive as ``MappingList([Mapping({"github.com/pipehub/sample": MappingList([...])})])``:
the label sits where a field name would normally be.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from pipehub.core.exceptions import DecodeError


@dataclass(frozen=True)
class Scalar:
    value: Union[str, int]

    @property
    def kind(self) -> str:
        return "integer" if isinstance(self.value, int) else "string"


@dataclass(frozen=True)
class Mapping:
    entries: Dict[str, "GenericNode"] = field(default_factory=dict)

    kind = "mapping"

    def get(self, key: str) -> Optional["GenericNode"]:
        return self.entries.get(key)

    def items(self) -> Iterator[Tuple[str, "GenericNode"]]:
        return iter(self.entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class MappingList:
    items: Tuple[Mapping, ...] = ()

    kind = "mapping list"

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


GenericNode = Union[Scalar, Mapping, MappingList]


def describe(node: Optional[GenericNode]) -> str:
    """Human-readable node kind, used in decode error messages."""
    if node is None:
        return "nothing"
    if isinstance(node, Scalar):
        return f"{node.kind} {node.value!r}"
    if isinstance(node, (Mapping, MappingList)):
        return node.kind
    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def from_python(obj: Any, *, path: str = "<root>") -> GenericNode:
    """Convert parsed JSON/YAML data into a :data:`GenericNode`.

    - ``dict`` -> :class:`Mapping` (``None`` values are treated as absent keys)
    - ``list`` of ``dict`` -> :class:`MappingList`
    - ``str`` / ``int`` -> :class:`Scalar`

    Booleans, floats and lists of scalars have no counterpart in the document
    model and raise :class:`~pipehub.core.exceptions.DecodeError`.
    """
    if isinstance(obj, bool):
        raise DecodeError(path, f"unsupported boolean value {obj!r}")

    if isinstance(obj, (str, int)):
        return Scalar(obj)

    if isinstance(obj, dict):
        entries: Dict[str, GenericNode] = {}
        for key, value in obj.items():
            if not isinstance(key, str):
                raise DecodeError(f"{path}.{key}", f"keys must be strings, got {type(key).__name__}")
            if value is None:
                continue
            child = key if path == "<root>" else f"{path}.{key}"
            entries[key] = from_python(value, path=child)
        return Mapping(entries)

    if isinstance(obj, list):
        items = []
        for index, item in enumerate(obj):
            if not isinstance(item, dict):
                raise DecodeError(f"{path}[{index}]", f"expected mapping, got {type(item).__name__}")
            node = from_python(item, path=f"{path}[{index}]")
            items.append(node)
        return MappingList(tuple(items))

    raise DecodeError(path, f"unsupported {type(obj).__name__} value {obj!r}")
