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

from threading import Lock
import logging


logger = logging.getLogger(__name__)


class KeyspaceHandle(object):
    def __init__(self, name, cluster):
        '''
        A keyspace in a cluster. The session with the keyspace is connected on
        first use.

        :param name: str
            Name of the keyspace.
        :param cluster: cassandra.cluster.Cluster
            The cluster which contains the keyspace.
        '''
        self._name = name
        self._cluster = cluster
        self._session = None
        self._prepared = {}
        self._session_lock = Lock()
        self._prepare_lock = Lock()

    @property
    def name(self):
        return self._name

    @property
    def cluster(self):
        return self._cluster

    def connect(self):
        '''
        The session with the keyspace, connected if there is no session yet or
        if it is shut down.
        '''
        with self._session_lock:
            session = self._session
            if session is None or session.is_shutdown:
                logger.debug('Connecting with keyspace %s', self._name)
                session = self._cluster.connect(self._name)
                self._session = session
                self._prepared = {}
            return session

    session = property(connect)

    def execute(self, query, *args, **kwargs):
        return self.session.execute(query, *args, **kwargs)

    def prepare(self, query):
        session = self.session
        with self._prepare_lock:
            prepared = self._prepared.get(query)
            if prepared is None:
                prepared = self._prepared[query] = session.prepare(query)
            return prepared

    def shutdown(self):
        '''
        Shut down the session, if any. The cluster is left as is, it is shut
        down through the registry which owns it.
        '''
        with self._session_lock:
            session, self._session = self._session, None
            self._prepared = {}
        if session is not None:
            session.shutdown()

    def __repr__(self):
        return '<KeyspaceHandle %s>' % self._name
