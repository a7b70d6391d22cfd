# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from unittest.case import TestCase
import os
import pickle

from cassres.exceptions import ConfigurationError
from cassres.util.conf import Bool, CASSRES_ENV_KEY, CSV, Config, Int, Long, String


class SettingTest(TestCase):
    def test_bool(self):
        setting = Bool(True)
        self.assertTrue(setting.default)
        self.assertTrue(setting.fmt('true'))
        self.assertFalse(setting.fmt('false'))
        self.assertFalse(setting.fmt(False))
        for token in ('True', 'FALSE', 'yes', '1', '', ' true', None):
            with self.assertRaises(ValueError, msg=token):
                setting.fmt(token)

    def test_int(self):
        setting = Int()
        self.assertIsNone(setting.default)
        self.assertEqual(setting.fmt('42'), 42)
        self.assertEqual(setting.fmt('-42'), -42)
        self.assertEqual(setting.fmt('+7'), 7)
        self.assertEqual(setting.fmt(2 ** 31 - 1), 2 ** 31 - 1)
        self.assertEqual(setting.fmt(str(-2 ** 31)), -2 ** 31)
        for value in ('', ' 1', '1.5', '1_000', 'ten', str(2 ** 31), True, 1.0):
            with self.assertRaises(ValueError, msg=value):
                setting.fmt(value)

    def test_long(self):
        setting = Long()
        self.assertEqual(setting.fmt(str(2 ** 40)), 2 ** 40)
        self.assertEqual(setting.fmt(str(2 ** 63 - 1)), 2 ** 63 - 1)
        with self.assertRaises(ValueError):
            setting.fmt(str(2 ** 63))

    def test_string(self):
        self.assertEqual(String().fmt('x'), 'x')
        with self.assertRaises(ValueError):
            String().fmt(1)

    def test_csv(self):
        self.assertEqual(CSV().fmt('a, b ,c'), ['a', 'b', 'c'])
        self.assertEqual(CSV().fmt(('a', 'b')), ['a', 'b'])

    def test_coerce(self):
        with self.assertRaisesRegex(ConfigurationError, 'maxActive') as cm:
            Int().coerce('many', 'maxActive')
        self.assertIsInstance(cm.exception.__cause__, ValueError)
        self.assertIsInstance(cm.exception, ValueError)

    def test_desc(self):
        self.assertEqual(Int(1, desc='One.').desc, 'One. Defaults to 1.')


class ConfigTest(TestCase):
    def setUp(self):
        self.env = os.environ.pop(CASSRES_ENV_KEY, None)

    def tearDown(self):
        os.environ.pop(CASSRES_ENV_KEY, None)
        if self.env is not None:
            os.environ[CASSRES_ENV_KEY] = self.env

    def test_setting_default(self):
        conf = Config(use_environment=False)
        self.assertEqual(conf.get('cassres.cassandra.default_port'), 9042)
        self.assertFalse(conf.get('cassres.cassandra.connect_on_resolve'))
        self.assertIsNone(conf.get('cassres.cassandra.protocol_version'))
        self.assertEqual(conf.get('cassres.cassandra.default_port', default=1), 1)

    def test_unknown_keys(self):
        conf = Config(use_environment=False, **{'no.such.key': 'x'})
        self.assertEqual(conf['no.such.key'], 'x')
        self.assertIsNone(conf.get('no.such.other_key'))
        self.assertIsNone(conf.get('nodots'))

    def test_coercion(self):
        conf = Config({'cassres.cassandra.default_port': '9160',
                       'cassres.cassandra.compression': 'false'}, use_environment=False)
        self.assertEqual(conf.get('cassres.cassandra.default_port'), 9160)
        self.assertFalse(conf.get('cassres.cassandra.compression'))

    def test_invalid_value(self):
        conf = Config({'cassres.cassandra.compression': 'no'}, use_environment=False)
        with self.assertRaisesRegex(ConfigurationError, 'cassres.cassandra.compression'):
            conf.get('cassres.cassandra.compression')
        conf['x.y'] = 'z'
        with self.assertRaises(ConfigurationError):
            conf.get_int('x.y')

    def test_typed_getters(self):
        conf = Config({'a.b': '1', 'a.c': 'true'}, use_environment=False)
        self.assertEqual(conf.get_int('a.b'), 1)
        self.assertEqual(conf.get_str('a.b'), '1')
        self.assertTrue(conf.get_bool('a.c'))

    def test_update(self):
        conf = Config(use_environment=False)
        conf.update('a.b = 1', ('a.c', '2'), d='3')
        self.assertEqual(conf.values, {'a.b': '1', 'a.c': '2', 'd': '3'})
        self.assertTrue(conf.is_set('a.b'))
        self.assertFalse(conf.is_set('a.x'))
        with self.assertRaises(ConfigurationError):
            conf.update('a.b')
        with self.assertRaises(ConfigurationError):
            conf.update(1)

    def test_environment(self):
        os.environ[CASSRES_ENV_KEY] = 'cassres.cassandra.default_port=9160 "a.b=x y"'
        conf = Config()
        self.assertEqual(conf.get('cassres.cassandra.default_port'), 9160)
        self.assertEqual(conf.get('a.b'), 'x y')

    def test_environment_overridden(self):
        os.environ[CASSRES_ENV_KEY] = 'a.b=1'
        self.assertEqual(Config({'a.b': '2'}).get('a.b'), '2')

    def test_malformed_environment(self):
        os.environ[CASSRES_ENV_KEY] = 'a.b'
        with self.assertRaises(ConfigurationError):
            Config()

    def test_pickle(self):
        conf = Config({'a.b': '1'}, use_environment=False)
        self.assertEqual(pickle.loads(pickle.dumps(conf)).values, {'a.b': '1'})
