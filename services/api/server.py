from __future__ import annotations
from typing import Any
import logging

from flask import Flask, request, jsonify

from services.config.env import get_service_config, get_logging_config
from services.config.logging_ import setup_logging
from services.mapper.engine import MappingEngine
from services.mapper.fields import Document
from services.mapper.rules import RuleFormatError, parse_rules
from services.mapper.transforms import transform_names

log = logging.getLogger(__name__)

app = Flask(__name__)
ENGINE = MappingEngine()

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_service_config().api_key


def _get_max_rules() -> int:
    n = app.config.get('MAX_RULES')
    if n is None:
        n = get_service_config().max_rules
    return int(n)


def _include_report() -> bool:
    flag = request.args.get('report')
    if flag is not None:
        return flag.lower() in ('1', 'true', 'yes')
    v = app.config.get('INCLUDE_REPORT')
    if v is None:
        v = get_service_config().include_report
    return bool(v)


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None

@app.before_request
def _auth():
    # Only enforce for mapping routes; health stays open
    if request.path.startswith('/mapping'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
    return None

@app.get('/health')
def health():
    return jsonify({'status': 'ok', 'transforms': transform_names()})

@app.post('/mapping/apply')
def apply_mapping():
    payload: Any = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'request body must be a JSON object'}), 400
    doc_raw = payload.get('document')
    if not isinstance(doc_raw, dict):
        return jsonify({'error': 'document is required'}), 400
    fields = doc_raw.get('fields', {})
    if not isinstance(fields, dict):
        return jsonify({'error': 'document.fields must be an object'}), 400
    rules_raw = payload.get('rules')
    if not isinstance(rules_raw, list):
        return jsonify({'error': 'rules must be a list'}), 400

    max_rules = _get_max_rules()
    if max_rules > 0 and len(rules_raw) > max_rules:
        return jsonify({'error': 'too_many_rules', 'max_rules': max_rules}), 413

    try:
        rules = parse_rules(rules_raw)
        doc = Document.from_fields(fields)
    except (RuleFormatError, TypeError) as e:
        return jsonify({'error': str(e)}), 400

    out, report = ENGINE.apply_with_report(doc, rules)
    log.info("applied mapping: %d rules, %d applied, %d inapplicable candidates",
             report.rules_total, report.rules_applied, report.candidates_inapplicable)

    body = {'document': {'fields': out.to_plain()}}
    if _include_report():
        body['report'] = report.to_dict()
    return jsonify(body)


if __name__ == '__main__':
    lc = get_logging_config()
    setup_logging(lc.level, lc.log_file)
    sc = get_service_config()
    app.run(host=sc.host, port=sc.port)
