from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

Scalar = Union[str, float, bool, None]


class ValueKind(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


@dataclass(frozen=True)
class Value:
    """One field's content: string | number | boolean | null.

    Only the slot matching `kind` is meaningful. Build with the named
    constructors or `Value.of` rather than the raw dataclass.
    """
    kind: ValueKind
    string_value: str = ""
    number_value: float = 0.0
    bool_value: bool = False

    @staticmethod
    def string(s: str) -> "Value":
        return Value(kind=ValueKind.STRING, string_value=s)

    @staticmethod
    def number(x: float) -> "Value":
        return Value(kind=ValueKind.NUMBER, number_value=float(x))

    @staticmethod
    def boolean(b: bool) -> "Value":
        return Value(kind=ValueKind.BOOL, bool_value=bool(b))

    @staticmethod
    def null() -> "Value":
        return Value(kind=ValueKind.NULL)

    @staticmethod
    def of(obj: Any) -> "Value":
        if isinstance(obj, Value):
            return obj
        # bool before int: True is an int in Python
        if isinstance(obj, bool):
            return Value.boolean(obj)
        if isinstance(obj, (int, float)):
            try:
                return Value.number(obj)
            except OverflowError:
                raise TypeError("number too large for a float field value") from None
        if isinstance(obj, str):
            return Value.string(obj)
        if obj is None:
            return Value.null()
        raise TypeError(f"unsupported field value type: {type(obj).__name__}")

    @property
    def is_string(self) -> bool:
        return self.kind is ValueKind.STRING

    @property
    def is_number(self) -> bool:
        return self.kind is ValueKind.NUMBER

    def as_string(self) -> str:
        if not self.is_string:
            raise TypeError(f"value is {self.kind.value}, not string")
        return self.string_value

    def as_number(self) -> float:
        if not self.is_number:
            raise TypeError(f"value is {self.kind.value}, not number")
        return self.number_value

    def to_python(self) -> Scalar:
        if self.kind is ValueKind.STRING:
            return self.string_value
        if self.kind is ValueKind.NUMBER:
            return self.number_value
        if self.kind is ValueKind.BOOL:
            return self.bool_value
        return None


def maybe_string(v: Optional[Value]) -> Optional[str]:
    """Return the string payload if `v` is present and string-kind, else None."""
    if v is None or not v.is_string:
        return None
    return v.string_value


def maybe_number(v: Optional[Value]) -> Optional[float]:
    if v is None or not v.is_number:
        return None
    return v.number_value
