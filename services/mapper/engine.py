from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from services.mapper.fields import Document, FieldStore
from services.mapper.rules import MappingRule
from services.mapper.strategies import dispatch

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOutcome:
    rule_index: int
    rule_name: Optional[str]
    candidate_index: Optional[int]  # None when no candidate applied


@dataclass
class MappingReport:
    rules_total: int = 0
    rules_applied: int = 0
    candidates_tried: int = 0
    candidates_inapplicable: int = 0
    outcomes: List[RuleOutcome] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rules_total": self.rules_total,
            "rules_applied": self.rules_applied,
            "candidates_tried": self.candidates_tried,
            "candidates_inapplicable": self.candidates_inapplicable,
            "outcomes": [
                {"rule_index": o.rule_index, "rule_name": o.rule_name, "candidate_index": o.candidate_index}
                for o in self.outcomes
            ],
        }


def evaluate_rule(store: FieldStore, rule: MappingRule, report: Optional[MappingReport] = None) -> Optional[int]:
    """Try the rule's candidates in order; return the index of the first one that applied."""
    for idx, cand in enumerate(rule.candidate_mappings):
        if report is not None:
            report.candidates_tried += 1
        if dispatch(store, cand):
            return idx
        if report is not None:
            report.candidates_inapplicable += 1
        log.debug(
            "rule %s: candidate %d (%s %s -> %s) not applicable",
            rule.name or "?", idx, cand.mapping_type.name,
            list(cand.source_field_paths), list(cand.target_field_paths),
        )
    return None


class MappingEngine:
    """Applies an ordered rule list to a document.

    Rules run sequentially over one accumulating field store, so a rule can
    read what an earlier rule wrote and reordering rules changes the result.
    The input document is copied, never mutated. The engine holds no state
    between calls.
    """

    def apply(self, document: Document, rules: Sequence[MappingRule]) -> Document:
        out, _ = self.apply_with_report(document, rules)
        return out

    def apply_with_report(self, document: Document, rules: Sequence[MappingRule]) -> Tuple[Document, MappingReport]:
        out = document.copy()
        report = MappingReport(rules_total=len(rules))
        for i, rule in enumerate(rules):
            winner = evaluate_rule(out.fields, rule, report)
            if winner is not None:
                report.rules_applied += 1
                log.debug("rule %s applied candidate %d", rule.name or i, winner)
            report.outcomes.append(RuleOutcome(rule_index=i, rule_name=rule.name, candidate_index=winner))
        return out, report


_DEFAULT_ENGINE = MappingEngine()


def apply_mapping(document: Document, rules: Sequence[MappingRule]) -> Document:
    return _DEFAULT_ENGINE.apply(document, rules)
