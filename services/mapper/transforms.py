from __future__ import annotations
from typing import Callable, Dict, List, Optional

StringTransform = Callable[[str], str]


_TRIM_CHARS = "".join(chr(c) for c in range(0x21))


def _uppercase(s: str) -> str:
    return s.upper()


def _trim(s: str) -> str:
    # ASCII control and space only (<= U+0020); NBSP and other Unicode spaces stay
    return s.strip(_TRIM_CHARS)


# canonical lower-cased name -> transform
TRANSFORMS: Dict[str, StringTransform] = {
    "uppercase": _uppercase,
    "trim": _trim,
}


def get_transform(name: str) -> Optional[StringTransform]:
    return TRANSFORMS.get((name or "").lower())


def register_transform(name: str, fn: StringTransform) -> None:
    key = (name or "").strip().lower()
    if not key:
        raise ValueError("transform name must be non-empty")
    TRANSFORMS[key] = fn


def transform_names() -> List[str]:
    return sorted(TRANSFORMS.keys())
