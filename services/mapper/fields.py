from __future__ import annotations
from typing import Any, Dict, Iterator, List, Mapping, Optional

from services.mapper.values import Scalar, Value


class FieldStore:
    """Flat path -> Value store.

    Lookups are exact-key only; "a.b" is a key, not a path into "a".
    Strategies only go through get/set so a structured resolver can
    replace the dict later.
    """

    def __init__(self, fields: Optional[Mapping[str, Value]] = None):
        self._fields: Dict[str, Value] = dict(fields or {})

    def get(self, path: str) -> Optional[Value]:
        return self._fields.get(path)

    def set(self, path: str, value: Value) -> None:
        self._fields[path] = value

    def paths(self) -> List[str]:
        return list(self._fields.keys())

    def copy(self) -> "FieldStore":
        # Values are immutable, a shallow copy is enough
        return FieldStore(self._fields)

    def to_dict(self) -> Dict[str, Value]:
        return dict(self._fields)

    def __contains__(self, path: object) -> bool:
        return path in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __repr__(self) -> str:
        return f"FieldStore({self._fields!r})"


class Document:
    def __init__(self, fields: Optional[FieldStore] = None):
        self.fields = fields if fields is not None else FieldStore()

    @staticmethod
    def from_fields(mapping: Mapping[str, Any]) -> "Document":
        """Build from plain scalars (JSON-decoded values); raises TypeError on containers."""
        store = FieldStore()
        for path, raw in mapping.items():
            if not isinstance(path, str):
                raise TypeError(f"field path must be a string, got {type(path).__name__}")
            try:
                store.set(path, Value.of(raw))
            except TypeError as e:
                raise TypeError(f"field '{path}': {e}") from e
        return Document(store)

    def copy(self) -> "Document":
        return Document(self.fields.copy())

    def get(self, path: str) -> Optional[Value]:
        return self.fields.get(path)

    def to_plain(self) -> Dict[str, Scalar]:
        return {k: v.to_python() for k, v in self.fields.to_dict().items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.fields.to_dict() == other.fields.to_dict()

    def __repr__(self) -> str:
        return f"Document({self.to_plain()!r})"
