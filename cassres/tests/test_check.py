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

from tempfile import NamedTemporaryFile
from unittest.case import TestCase
import io
import os

from cassres.check import main
import cassres
from cassres.util.conf import Config


CONTEXT_XML = '''<Context>
    <Resource name="cassandra/Good"
              factory="cassres.cassandra.factory.KeyspaceResourceFactory"
              hosts="cass1,cass2:9160"
              clusterName="Test Cluster"
              keyspace="Keyspace1"
              maxActive="20"/>
    <Resource name="cassandra/Bad"
              factory="cassres.cassandra.factory.KeyspaceResourceFactory"
              hosts="cass1"
              clusterName="Test Cluster"/>
    <Resource name="jdbc/Other"
              factory="some.other.Factory"/>
</Context>
'''


class CheckTest(TestCase):
    def setUp(self):
        with NamedTemporaryFile('w', suffix='.xml', delete=False) as f:
            f.write(CONTEXT_XML)
        self.path = f.name
        self.conf = Config(use_environment=False)
        self.out = io.StringIO()

    def tearDown(self):
        os.unlink(self.path)

    def check(self, *args):
        return main([self.path] + list(args), self.out, self.conf)

    def test_good(self):
        self.assertEqual(self.check('cassandra/Good'), 0)
        output = self.out.getvalue()
        self.assertIn('cassandra/Good: keyspace Keyspace1 on cluster Test Cluster', output)
        self.assertIn('hosts=cass1:9042,cass2:9160', output)
        self.assertIn('max_active=20', output)

    def test_all(self):
        self.assertEqual(self.check(), 1)
        output = self.out.getvalue()
        self.assertIn('cassandra/Good: keyspace Keyspace1', output)
        self.assertIn('cassandra/Bad: The keyspace attribute of the resource is required', output)
        self.assertNotIn('jdbc/Other', output)

    def test_conf(self):
        self.assertEqual(self.check('cassandra/Good', '--conf', 'cassres.cassandra.default_port=9160'), 0)
        self.assertIn('hosts=cass1:9160,cass2:9160', self.out.getvalue())

    def test_unknown_name(self):
        self.assertEqual(self.check('cassandra/Good', 'cassandra/Missing'), 1)
        self.assertIn('cassandra/Missing: no keyspace resource declared', self.out.getvalue())

    def test_unreadable(self):
        self.assertEqual(main([self.path + '.missing'], self.out, self.conf), 1)
        self.assertIn('Unable to read', self.out.getvalue())

    def test_conf_overrides_not_kept(self):
        self.check('cassandra/Good', '--conf', 'cassres.cassandra.default_port=9160')
        self.assertEqual(self.conf.values, {})

    def test_process_conf_untouched(self):
        process_conf = cassres._conf
        cassres._conf = Config(use_environment=False)
        try:
            self.assertEqual(main([self.path, 'cassandra/Good', '--conf', 'cassres.cassandra.default_port=9160'],
                                  self.out), 0)
            self.assertEqual(cassres.get_conf().values, {})
        finally:
            cassres._conf = process_conf
        self.assertIn('hosts=cass1:9160,cass2:9160', self.out.getvalue())
