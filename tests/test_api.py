import unittest

from services.api.server import app


class TestMappingAPI(unittest.TestCase):
    def setUp(self):
        app.testing = True
        # Keep tests independent of the process environment
        app.config['API_KEY'] = None
        app.config['MAX_RULES'] = 1000
        app.config['INCLUDE_REPORT'] = True
        self.client = app.test_client()

    def _apply(self, fields, rules, **kwargs):
        return self.client.post('/mapping/apply', json={'document': {'fields': fields}, 'rules': rules}, **kwargs)

    def test_health(self):
        rv = self.client.get('/health')
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        self.assertEqual(body.get('status'), 'ok')
        self.assertIn('uppercase', body.get('transforms', []))

    def test_apply_fallback_and_aggregate(self):
        rules = [
            {'candidate_mappings': [
                {'mapping_type': 'DIRECT', 'source_field_paths': ['title'], 'target_field_paths': ['output_title']},
                {'mapping_type': 'DIRECT', 'source_field_paths': ['headline'], 'target_field_paths': ['output_title']},
            ]},
            {'candidate_mappings': [
                {'mapping_type': 'AGGREGATE', 'source_field_paths': ['val1', 'val2'], 'target_field_paths': ['sum'],
                 'aggregate_config': {'aggregation_type': 'SUM'}},
            ]},
        ]
        rv = self._apply({'headline': 'This is the headline', 'val1': 10.5, 'val2': 20.5}, rules)
        self.assertEqual(rv.status_code, 200)
        body = rv.get_json()
        fields = body['document']['fields']
        self.assertEqual(fields['output_title'], 'This is the headline')
        self.assertAlmostEqual(fields['sum'], 31.0)
        self.assertEqual(body['report']['rules_applied'], 2)
        self.assertEqual(body['report']['candidates_inapplicable'], 1)

    def test_report_can_be_disabled(self):
        app.config['INCLUDE_REPORT'] = False
        rv = self._apply({'a': 'x'}, [])
        self.assertEqual(rv.status_code, 200)
        self.assertNotIn('report', rv.get_json())
        rv2 = self.client.post('/mapping/apply?report=1', json={'document': {'fields': {}}, 'rules': []})
        self.assertIn('report', rv2.get_json())

    def test_bad_requests(self):
        rv = self.client.post('/mapping/apply', data='not json', content_type='application/json')
        self.assertEqual(rv.status_code, 400)
        rv = self.client.post('/mapping/apply', json={'rules': []})
        self.assertEqual(rv.status_code, 400)
        self.assertEqual(rv.get_json().get('error'), 'document is required')
        rv = self.client.post('/mapping/apply', json={'document': {'fields': {}}, 'rules': {}})
        self.assertEqual(rv.status_code, 400)
        rv = self._apply({'a': [1, 2]}, [])
        self.assertEqual(rv.status_code, 400)
        rv = self._apply({}, [{'candidate_mappings': 'x'}])
        self.assertEqual(rv.status_code, 400)
        self.assertIn('rule 0', rv.get_json().get('error'))

    def test_oversized_integer_is_bad_request(self):
        body = '{"document": {"fields": {"n": 1' + '0' * 400 + '}}, "rules": []}'
        rv = self.client.post('/mapping/apply', data=body, content_type='application/json')
        self.assertEqual(rv.status_code, 400)
        self.assertIn("field 'n'", rv.get_json().get('error'))

    def test_too_many_rules(self):
        app.config['MAX_RULES'] = 1
        rv = self._apply({}, [{'candidate_mappings': []}, {'candidate_mappings': []}])
        self.assertEqual(rv.status_code, 413)
        self.assertEqual(rv.get_json().get('error'), 'too_many_rules')

    def test_auth_api_key(self):
        app.config['API_KEY'] = 'secret'
        rv = self._apply({}, [])
        self.assertEqual(rv.status_code, 401)
        rv2 = self._apply({}, [], headers={'X-API-Key': 'secret'})
        self.assertEqual(rv2.status_code, 200)
        # health stays open
        self.assertEqual(self.client.get('/health').status_code, 200)


if __name__ == '__main__':
    unittest.main()
