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

'''
A factory of keyspace resources. A resource is declared with the hosts, name
of the cluster and keyspace and, optionally, any of the options of
:class:`cassres.cassandra.hosts.HostConfigurator` under their camel case
names::

    <Resource name="cassandra/Keyspace1"
              type="cassres.cassandra.keyspace.KeyspaceHandle"
              factory="cassres.cassandra.factory.KeyspaceResourceFactory"
              hosts="cass1:9042,cass2:9042,cass3:9042"
              keyspace="Keyspace1"
              clusterName="Test Cluster"
              maxActive="20"
              maxWaitTimeWhenExhausted="10"
              autoDiscoverHosts="true"
              runAutoDiscoveryAtStartup="true"/>
'''

from collections import namedtuple
from threading import Lock
import logging

from cassres.cassandra.cluster import default_registry
from cassres.cassandra.hosts import HostConfigurator
from cassres.cassandra.keyspace import KeyspaceHandle
from cassres.exceptions import ConfigurationError, InvalidInputError
from cassres.naming import Reference
from cassres.util.conf import Bool, Int, Long
import cassres


logger = logging.getLogger(__name__)


HOSTS = 'hosts'
CLUSTER_NAME = 'clusterName'
KEYSPACE = 'keyspace'

REQUIRED = (HOSTS, CLUSTER_NAME, KEYSPACE)

AUTO_DISCOVER_HOSTS = 'autoDiscoverHosts'
USE_HOST_TIMEOUT_TRACKER = 'useHostTimeoutTracker'
RETRY_DOWNED_HOST_DELAY = 'retryDownedHostDelayInSeconds'
RETRY_DOWNED_HOSTS_QUEUE_SIZE = 'retryDownedHostsQueueSize'

# attribute, option, setting
OPTIONS = (
    ('maxActive', 'max_active', Int()),
    ('maxWaitTimeWhenExhausted', 'max_wait_time_when_exhausted', Int()),
    ('lifo', 'lifo', Bool()),
    ('useThriftFramedTransport', 'use_thrift_framed_transport', Bool()),
    ('maxFrameSize', 'max_frame_size', Int()),
    ('useSocketKeepalive', 'use_socket_keepalive', Bool()),
    ('maxConnectTimeMillis', 'max_connect_time_millis', Long()),
    ('maxLastSuccessTimeMillis', 'max_last_success_time_millis', Long()),
    ('cassandraThriftSocketTimeout', 'cassandra_thrift_socket_timeout', Int()),
)

# applied only if autoDiscoverHosts is true
DISCOVERY_OPTIONS = (
    ('runAutoDiscoveryAtStartup', 'run_auto_discovery_at_startup', Bool()),
    ('autoDiscoveryDelayInSeconds', 'auto_discovery_delay_in_seconds', Int()),
)

# applied only if useHostTimeoutTracker is true
HOST_TIMEOUT_OPTIONS = (
    ('hostTimeoutCounter', 'host_timeout_counter', Int()),
    ('hostTimeoutSuspensionDurationInSeconds', 'host_timeout_suspension_duration_in_seconds', Int()),
    ('hostTimeoutUnsuspendCheckDelay', 'host_timeout_unsuspend_check_delay', Int()),
    ('hostTimeoutWindow', 'host_timeout_window', Int()),
)


ResourceConfig = namedtuple('ResourceConfig', 'cluster_name keyspace_name configurator')


def _content(reference, attribute):
    addr = reference.get(attribute)
    return None if addr is None else addr.content


def _required(reference, attribute):
    content = _content(reference, attribute)
    content = None if content is None else str(content).strip()
    if not content:
        raise ConfigurationError('The %s attribute of the resource is required' % attribute)
    return content


def _apply(reference, options, table):
    for attribute, option, setting in table:
        content = _content(reference, attribute)
        if content is not None:
            options[option] = setting.coerce(content, attribute)


def parse_reference(reference, conf=None):
    '''
    Read the configuration of a keyspace resource from a reference.

    :param reference: Reference
        With at least the hosts, clusterName and keyspace attributes.
    :param conf: Config or None
        Provides the default port, defaults to cassres.get_conf().
    :return: ResourceConfig
    '''
    if not isinstance(reference, Reference):
        raise InvalidInputError('%r is not a cassres.naming.Reference' % (reference,))
    conf = conf or cassres.get_conf()

    hosts, cluster_name, keyspace_name = (_required(reference, attribute) for attribute in REQUIRED)

    options = {}
    _apply(reference, options, OPTIONS)

    auto_discover_hosts = _content(reference, AUTO_DISCOVER_HOSTS)
    if auto_discover_hosts is not None:
        options['auto_discover_hosts'] = Bool().coerce(auto_discover_hosts, AUTO_DISCOVER_HOSTS)
        if options['auto_discover_hosts']:
            _apply(reference, options, DISCOVERY_OPTIONS)

    use_host_timeout_tracker = _content(reference, USE_HOST_TIMEOUT_TRACKER)
    if use_host_timeout_tracker is not None:
        options['use_host_timeout_tracker'] = Bool().coerce(use_host_timeout_tracker, USE_HOST_TIMEOUT_TRACKER)
        if options['use_host_timeout_tracker']:
            _apply(reference, options, HOST_TIMEOUT_OPTIONS)

    retry_delay = _content(reference, RETRY_DOWNED_HOST_DELAY)
    if retry_delay is not None:
        retry_delay = Int().coerce(retry_delay, RETRY_DOWNED_HOST_DELAY)
        options['retry_downed_hosts_delay_in_seconds'] = retry_delay
        # a delay of less than a second disables retrying downed hosts
        if retry_delay < 1:
            options['retry_downed_hosts'] = False
        queue_size = _content(reference, RETRY_DOWNED_HOSTS_QUEUE_SIZE)
        if queue_size is not None:
            options['retry_downed_hosts_queue_size'] = Int().coerce(queue_size, RETRY_DOWNED_HOSTS_QUEUE_SIZE)

    configurator = HostConfigurator(hosts, conf.get('cassres.cassandra.default_port'), **options)
    return ResourceConfig(cluster_name, keyspace_name, configurator)


class KeyspaceResourceFactory(object):
    def __init__(self, registry=None, conf=None):
        '''
        Creates a KeyspaceHandle from a reference on first resolve and returns
        that same handle on every resolve thereafter.

        :param registry: ClusterRegistry or None
            The registry to get the cluster from, shared with other factories
            to share clusters by name. Defaults to the process wide
            default_registry().
        :param conf: Config or None
            Defaults to cassres.get_conf().
        '''
        self.conf = conf
        self.registry = registry if registry is not None else default_registry()
        self.configurator = None
        self.cluster = None
        self.keyspace = None
        self._lock = Lock()

    def resolve(self, reference, name=None, context=None, environment=None):
        '''
        The keyspace handle for the resource referenced.

        :param reference: Reference
            The resource declaration.
        :param name: str or None
            The name the resource is bound to, if any.
        :param context: Context or None
            The context the name is bound in, if any.
        :param environment: dict or None
            Unused, accepted for factories which need it.
        '''
        if not isinstance(reference, Reference):
            raise InvalidInputError('%r is not a cassres.naming.Reference' % (reference,))

        with self._lock:
            if self.keyspace is None:
                self._configure(reference, name)

        return self.keyspace

    def _configure(self, reference, name):
        conf = self.conf or cassres.get_conf()
        resource = parse_reference(reference, conf)
        configurator = resource.configurator

        existing = self.registry.get(resource.cluster_name)
        cluster = self.registry.get_or_create(resource.cluster_name, configurator)
        keyspace = KeyspaceHandle(resource.keyspace_name, cluster)
        if conf.get('cassres.cassandra.connect_on_resolve'):
            try:
                keyspace.connect()
            except Exception:
                # shut down the cluster again if it was created for this resource
                if cluster is not existing and self.registry.get(resource.cluster_name) is cluster:
                    self.registry.shutdown(resource.cluster_name)
                raise

        logger.info('Keyspace resource %s created with %r', name or resource.keyspace_name, configurator)

        self.configurator = configurator
        self.cluster = cluster
        self.keyspace = keyspace
