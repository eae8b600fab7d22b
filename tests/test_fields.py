import unittest
from services.mapper.fields import Document, FieldStore
from services.mapper.values import Value, ValueKind
from services.mapper.transforms import get_transform, register_transform, transform_names, TRANSFORMS


class TestValue(unittest.TestCase):
    def test_of_detects_kind(self):
        self.assertEqual(Value.of('x').kind, ValueKind.STRING)
        self.assertEqual(Value.of(3).kind, ValueKind.NUMBER)
        self.assertEqual(Value.of(2.5).kind, ValueKind.NUMBER)
        self.assertEqual(Value.of(None).kind, ValueKind.NULL)
        # bool is not a number here
        self.assertEqual(Value.of(True).kind, ValueKind.BOOL)
        self.assertFalse(Value.of(False).is_number)

    def test_to_python(self):
        self.assertEqual(Value.of('x').to_python(), 'x')
        self.assertEqual(Value.of(3).to_python(), 3.0)
        self.assertIs(Value.of(True).to_python(), True)
        self.assertIsNone(Value.null().to_python())

    def test_rejects_containers(self):
        with self.assertRaises(TypeError):
            Value.of([1, 2])
        with self.assertRaises(TypeError):
            Value.of({'a': 1})

    def test_accessors_check_kind(self):
        with self.assertRaises(TypeError):
            Value.string('x').as_number()
        with self.assertRaises(TypeError):
            Value.number(1).as_string()

    def test_structural_equality(self):
        self.assertEqual(Value.string('a'), Value.of('a'))
        self.assertNotEqual(Value.string('1'), Value.number(1))


class TestFieldStore(unittest.TestCase):
    def test_exact_key_lookup(self):
        s = FieldStore()
        s.set('a.b', Value.string('x'))
        self.assertEqual(s.get('a.b'), Value.string('x'))
        self.assertIsNone(s.get('a'))

    def test_set_overwrites(self):
        s = FieldStore({'a': Value.string('x')})
        s.set('a', Value.number(2))
        self.assertEqual(s.get('a'), Value.number(2))
        self.assertEqual(len(s), 1)

    def test_copy_is_isolated(self):
        s = FieldStore({'a': Value.string('x')})
        c = s.copy()
        c.set('b', Value.string('y'))
        self.assertNotIn('b', s)
        self.assertIn('b', c)


class TestDocument(unittest.TestCase):
    def test_from_fields_and_back(self):
        doc = Document.from_fields({'s': 'x', 'n': 1, 'b': False, 'z': None})
        self.assertEqual(doc.to_plain(), {'s': 'x', 'n': 1.0, 'b': False, 'z': None})

    def test_from_fields_rejects_nested(self):
        with self.assertRaises(TypeError) as ctx:
            Document.from_fields({'nested': {'a': 1}})
        self.assertIn('nested', str(ctx.exception))


class TestTransformRegistry(unittest.TestCase):
    def tearDown(self):
        TRANSFORMS.pop('reverse', None)

    def test_builtins(self):
        self.assertEqual(transform_names(), sorted(['trim', 'uppercase']))
        self.assertEqual(get_transform('TRIM')('  a '), 'a')
        self.assertIsNone(get_transform('missing'))

    def test_register(self):
        register_transform('Reverse', lambda s: s[::-1])
        self.assertEqual(get_transform('reverse')('abc'), 'cba')
        with self.assertRaises(ValueError):
            register_transform('  ', lambda s: s)


if __name__ == '__main__':
    unittest.main()
