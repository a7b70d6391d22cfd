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

from cassres.naming import Reference
from cassres.util.conf import Config


class FakeSession(object):
    def __init__(self, keyspace):
        self.keyspace = keyspace
        self.is_shutdown = False
        self.executed = []
        self.prepared = []

    def execute(self, query, *args, **kwargs):
        self.executed.append((query, args, kwargs))
        return [query]

    def prepare(self, query):
        self.prepared.append(query)
        return ('prepared', query)

    def shutdown(self):
        self.is_shutdown = True


class FakeCluster(object):
    '''
    Stands in for cassandra.cluster.Cluster, it records its options and never
    connects.
    '''
    created = 0

    def __init__(self, **options):
        FakeCluster.created += 1
        self.options = options
        self.is_shutdown = False
        self.sessions = []

    def connect(self, keyspace=None):
        session = FakeSession(keyspace)
        self.sessions.append(session)
        return session

    def shutdown(self):
        self.is_shutdown = True


def make_conf(**values):
    return Config(values, use_environment=False)


def keyspace_reference(**attributes):
    base = dict(hosts='10.0.0.1:9042,10.0.0.2:9042', clusterName='Test Cluster', keyspace='Keyspace1')
    base.update(attributes)
    base = {k: v for k, v in base.items() if v is not None}
    return Reference.from_mapping('cassres.cassandra.keyspace.KeyspaceHandle', base,
                                  'cassres.cassandra.factory.KeyspaceResourceFactory')
