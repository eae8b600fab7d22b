"""Mapping strategies.

Each strategy takes the field store and one candidate mapping and returns
True when it applied. A strategy writes to the store only when it returns
True; missing fields, wrong value kinds and bad configuration all come back
as False so the evaluator can move on to the next candidate.
"""

from __future__ import annotations
from typing import Callable, Dict, List
import math

from services.mapper.fields import FieldStore
from services.mapper.rules import AggregationType, CandidateMapping, MappingType
from services.mapper.transforms import get_transform
from services.mapper.values import Value, maybe_number, maybe_string

Strategy = Callable[[FieldStore, CandidateMapping], bool]


def apply_direct(store: FieldStore, m: CandidateMapping) -> bool:
    if not m.has_valid_shape():
        return False
    value = store.get(m.source_field_paths[0])
    if value is None:
        return False
    store.set(m.target_field_paths[0], value)
    return True


def apply_transform(store: FieldStore, m: CandidateMapping) -> bool:
    if not m.has_valid_shape() or m.transform_config is None:
        return False
    value = store.get(m.source_field_paths[0])
    if value is None:
        return False
    fn = get_transform(m.transform_config.rule_name)
    if fn is None:
        return False
    # all registered transforms are string -> string
    s = maybe_string(value)
    if s is None:
        return False
    store.set(m.target_field_paths[0], Value.string(fn(s)))
    return True


def _concatenate(store: FieldStore, sources, target: str, delimiter: str) -> bool:
    parts: List[str] = []
    for path in sources:
        s = maybe_string(store.get(path))
        if s is None:
            return False
        parts.append(s)
    store.set(target, Value.string(delimiter.join(parts)))
    return True


def _sum(store: FieldStore, sources, target: str) -> bool:
    total = 0.0
    for path in sources:
        x = maybe_number(store.get(path))
        if x is None:
            return False
        total += x
    # inf/nan have no JSON form
    if not math.isfinite(total):
        return False
    store.set(target, Value.number(total))
    return True


def apply_aggregate(store: FieldStore, m: CandidateMapping) -> bool:
    if not m.has_valid_shape() or m.aggregate_config is None:
        return False
    cfg = m.aggregate_config
    target = m.target_field_paths[0]
    if cfg.aggregation_type is AggregationType.CONCATENATE:
        return _concatenate(store, m.source_field_paths, target, cfg.delimiter)
    if cfg.aggregation_type is AggregationType.SUM:
        return _sum(store, m.source_field_paths, target)
    return False


def _split_parts(s: str, delimiter: str) -> List[str]:
    # literal separator, not a pattern; an empty delimiter splits into characters
    parts = s.split(delimiter) if delimiter else (list(s) or [s])
    # trailing empty parts are dropped when the separator matched at all
    if len(parts) > 1:
        while parts and parts[-1] == "":
            parts.pop()
    return parts


def apply_split(store: FieldStore, m: CandidateMapping) -> bool:
    if not m.has_valid_shape():
        return False
    delimiter = m.split_config.delimiter if m.split_config is not None else ""
    s = maybe_string(store.get(m.source_field_paths[0]))
    if s is None:
        return False
    # extra parts are dropped and targets without a part are left as they are
    for target, part in zip(m.target_field_paths, _split_parts(s, delimiter)):
        store.set(target, Value.string(part))
    return True


STRATEGIES: Dict[MappingType, Strategy] = {
    MappingType.DIRECT: apply_direct,
    MappingType.TRANSFORM: apply_transform,
    MappingType.AGGREGATE: apply_aggregate,
    MappingType.SPLIT: apply_split,
}


def dispatch(store: FieldStore, m: CandidateMapping) -> bool:
    fn = STRATEGIES.get(m.mapping_type)
    if fn is None:
        return False
    return fn(store, m)
