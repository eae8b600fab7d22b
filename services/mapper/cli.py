import json
import sys
from pathlib import Path

from services.config.env import get_logging_config
from services.config.logging_ import setup_logging
from .engine import MappingEngine
from .fields import Document
from .rules import parse_rules

USAGE = "Usage: python -m services.mapper.cli [--report] <rules.json> <document.json>"


def _load_document(payload) -> Document:
    if not isinstance(payload, dict):
        raise ValueError("document must be a JSON object")
    # {"fields": {...}} wrapper, otherwise the object itself is the field set
    fields = payload.get("fields")
    if not isinstance(fields, dict):
        fields = payload
    return Document.from_fields(fields)


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    want_report = "--report" in args
    args = [a for a in args if a != "--report"]
    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        return 2

    cfg = get_logging_config()
    setup_logging(cfg.level, cfg.log_file)

    try:
        rules = parse_rules(json.loads(Path(args[0]).read_text()))
        doc = _load_document(json.loads(Path(args[1]).read_text()))
    except (OSError, ValueError, TypeError) as e:
        # json.JSONDecodeError and RuleFormatError are ValueErrors
        print(f"error: {e}", file=sys.stderr)
        return 1

    out, report = MappingEngine().apply_with_report(doc, rules)
    body = {"fields": out.to_plain()}
    if want_report:
        body["report"] = report.to_dict()
    print(json.dumps(body, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
