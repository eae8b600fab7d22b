from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


class RuleFormatError(ValueError):
    """Raised when a rule payload is structurally malformed."""


class MappingType(Enum):
    UNSPECIFIED = "unspecified"
    DIRECT = "direct"
    TRANSFORM = "transform"
    AGGREGATE = "aggregate"
    SPLIT = "split"


class AggregationType(Enum):
    UNSPECIFIED = "unspecified"
    CONCATENATE = "concatenate"
    SUM = "sum"


def _parse_enum(enum_cls, raw: Any, prefix: str):
    # Accepts "direct", "DIRECT", "MAPPING_TYPE_DIRECT"; unknown -> UNSPECIFIED
    if isinstance(raw, enum_cls):
        return raw
    if raw is None:
        return enum_cls.UNSPECIFIED
    if not isinstance(raw, str):
        raise RuleFormatError(f"{enum_cls.__name__} must be a string, got {type(raw).__name__}")
    name = raw.strip().lower()
    if name.startswith(prefix):
        name = name[len(prefix):]
    try:
        return enum_cls(name)
    except ValueError:
        return enum_cls.UNSPECIFIED


def _pick(d: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d:
            return d[k]
    return default


def _as_obj(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise RuleFormatError(f"{what} must be an object")
    return raw


def _paths(raw: Any, what: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)) or not all(isinstance(p, str) for p in raw):
        raise RuleFormatError(f"{what} must be a list of strings")
    return tuple(raw)


@dataclass(frozen=True)
class TransformConfig:
    rule_name: str


@dataclass(frozen=True)
class AggregateConfig:
    aggregation_type: AggregationType
    delimiter: str = ""


@dataclass(frozen=True)
class SplitConfig:
    delimiter: str


@dataclass(frozen=True)
class CandidateMapping:
    mapping_type: MappingType
    source_field_paths: Tuple[str, ...] = ()
    target_field_paths: Tuple[str, ...] = ()
    transform_config: Optional[TransformConfig] = None
    aggregate_config: Optional[AggregateConfig] = None
    split_config: Optional[SplitConfig] = None

    def has_valid_shape(self) -> bool:
        """Source/target count invariant for this candidate's mapping type."""
        n_src = len(self.source_field_paths)
        n_tgt = len(self.target_field_paths)
        if self.mapping_type is MappingType.DIRECT:
            return n_src >= 1 and n_tgt >= 1
        if self.mapping_type is MappingType.TRANSFORM:
            return n_src == 1 and n_tgt == 1
        if self.mapping_type is MappingType.AGGREGATE:
            return n_src >= 2 and n_tgt == 1
        if self.mapping_type is MappingType.SPLIT:
            return n_src == 1 and n_tgt >= 1
        return False

    @staticmethod
    def from_dict(d: Any) -> "CandidateMapping":
        d = _as_obj(d, "candidate mapping")
        mtype = _parse_enum(MappingType, _pick(d, "mapping_type", "mappingType", "type"), "mapping_type_")

        transform_config = None
        raw = _pick(d, "transform_config", "transformConfig")
        if raw is not None:
            raw = _as_obj(raw, "transform_config")
            name = _pick(raw, "rule_name", "ruleName", default="")
            if not isinstance(name, str):
                raise RuleFormatError("transform_config.rule_name must be a string")
            transform_config = TransformConfig(rule_name=name)

        aggregate_config = None
        raw = _pick(d, "aggregate_config", "aggregateConfig")
        if raw is not None:
            raw = _as_obj(raw, "aggregate_config")
            delim = _pick(raw, "delimiter", default="")
            if not isinstance(delim, str):
                raise RuleFormatError("aggregate_config.delimiter must be a string")
            aggregate_config = AggregateConfig(
                aggregation_type=_parse_enum(
                    AggregationType, _pick(raw, "aggregation_type", "aggregationType"), "aggregation_type_"
                ),
                delimiter=delim,
            )

        split_config = None
        raw = _pick(d, "split_config", "splitConfig")
        if raw is not None:
            raw = _as_obj(raw, "split_config")
            delim = _pick(raw, "delimiter", default="")
            if not isinstance(delim, str):
                raise RuleFormatError("split_config.delimiter must be a string")
            split_config = SplitConfig(delimiter=delim)

        return CandidateMapping(
            mapping_type=mtype,
            source_field_paths=_paths(_pick(d, "source_field_paths", "sourceFieldPaths"), "source_field_paths"),
            target_field_paths=_paths(_pick(d, "target_field_paths", "targetFieldPaths"), "target_field_paths"),
            transform_config=transform_config,
            aggregate_config=aggregate_config,
            split_config=split_config,
        )


@dataclass(frozen=True)
class MappingRule:
    """Ordered fallback chain: first candidate that applies wins."""
    candidate_mappings: Tuple[CandidateMapping, ...]
    name: Optional[str] = None

    @staticmethod
    def from_dict(d: Any) -> "MappingRule":
        d = _as_obj(d, "mapping rule")
        raw = _pick(d, "candidate_mappings", "candidateMappings", default=[])
        if not isinstance(raw, (list, tuple)):
            raise RuleFormatError("candidate_mappings must be a list")
        name = d.get("name")
        if name is not None and not isinstance(name, str):
            raise RuleFormatError("rule name must be a string")
        return MappingRule(
            candidate_mappings=tuple(CandidateMapping.from_dict(c) for c in raw),
            name=name,
        )


def parse_rules(payload: Any) -> List[MappingRule]:
    """Parse a rule list from JSON-decoded data.

    Accepts either a bare list of rules or an object with a "rules" key.
    Unknown mapping/aggregation type names parse as UNSPECIFIED; only
    structural problems raise RuleFormatError.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("rules", [])
    if not isinstance(payload, (list, tuple)):
        raise RuleFormatError("rules must be a list")
    out: List[MappingRule] = []
    for i, r in enumerate(payload):
        try:
            out.append(MappingRule.from_dict(r))
        except RuleFormatError as e:
            raise RuleFormatError(f"rule {i}: {e}") from e
    return out


def direct(source: str, target: str) -> CandidateMapping:
    return CandidateMapping(MappingType.DIRECT, (source,), (target,))


def transform(source: str, target: str, rule_name: str) -> CandidateMapping:
    return CandidateMapping(
        MappingType.TRANSFORM, (source,), (target,), transform_config=TransformConfig(rule_name)
    )


def concatenate(sources: List[str], target: str, delimiter: str = "") -> CandidateMapping:
    return CandidateMapping(
        MappingType.AGGREGATE, tuple(sources), (target,),
        aggregate_config=AggregateConfig(AggregationType.CONCATENATE, delimiter),
    )


def sum_of(sources: List[str], target: str) -> CandidateMapping:
    return CandidateMapping(
        MappingType.AGGREGATE, tuple(sources), (target,),
        aggregate_config=AggregateConfig(AggregationType.SUM),
    )


def split(source: str, targets: List[str], delimiter: str) -> CandidateMapping:
    return CandidateMapping(
        MappingType.SPLIT, (source,), tuple(targets), split_config=SplitConfig(delimiter)
    )


def rule(*candidates: CandidateMapping, name: Optional[str] = None) -> MappingRule:
    return MappingRule(candidate_mappings=tuple(candidates), name=name)
