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
import socket

from cassandra.cluster import Cluster, EXEC_PROFILE_DEFAULT, ExecutionProfile
from cassandra.connection import DefaultEndPoint

from cassres.cassandra.policies import ContactPointsOnlyPolicy, reconnection_policy
import cassres


logger = logging.getLogger(__name__)


def cluster_options(configurator, conf=None):
    '''
    The keyword arguments for a cassandra.cluster.Cluster configured by the
    given HostConfigurator.
    '''
    conf = conf or cassres.get_conf()
    options = dict(
        contact_points=[DefaultEndPoint(host.address, host.port) for host in configurator.hosts],
        compression=conf.get('cassres.cassandra.compression'),
        metrics_enabled=conf.get('cassres.cassandra.metrics_enabled'),
        reconnection_policy=reconnection_policy(configurator),
    )

    protocol_version = conf.get('cassres.cassandra.protocol_version')
    if protocol_version:
        options['protocol_version'] = protocol_version

    if configurator.max_connect_time_millis > 0:
        options['connect_timeout'] = configurator.max_connect_time_millis / 1000

    profile = {}
    if configurator.cassandra_thrift_socket_timeout > 0:
        timeout = configurator.cassandra_thrift_socket_timeout / 1000
        options['control_connection_timeout'] = timeout
        profile['request_timeout'] = timeout
    if configurator.use_socket_keepalive:
        options['sockopts'] = [(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)]

    if configurator.auto_discover_hosts:
        options['topology_event_refresh_window'] = configurator.auto_discovery_delay_in_seconds
    else:
        profile['load_balancing_policy'] = ContactPointsOnlyPolicy(configurator.addresses)

    options['execution_profiles'] = {EXEC_PROFILE_DEFAULT: ExecutionProfile(**profile)}

    return options


class ClusterRegistry(object):
    def __init__(self, cluster_factory=Cluster, conf=None):
        '''
        Clusters by name. Factories share the registry they are given, or
        default_registry() when given none.

        :param cluster_factory: callable
            Creates a cluster from the keyword arguments of cluster_options.
        :param conf: Config or None
            The configuration to use, defaults to cassres.get_conf().
        '''
        self.cluster_factory = cluster_factory
        self.conf = conf
        self.clusters = {}
        self._lock = Lock()

    def get_or_create(self, cluster_name, configurator):
        '''
        The cluster registered under cluster_name. It is created with the
        configurator if there is none yet or if the registered one is shut
        down; otherwise the configurator is ignored.
        '''
        with self._lock:
            cluster = self.clusters.get(cluster_name)
            if cluster is not None and not cluster.is_shutdown:
                logger.debug('Using existing cluster %s', cluster_name)
                return cluster
            cluster = self.cluster_factory(**cluster_options(configurator, self.conf))
            self.clusters[cluster_name] = cluster
            logger.info('Created cluster %s with hosts %s', cluster_name, configurator.hosts)
            return cluster

    def get(self, cluster_name):
        return self.clusters.get(cluster_name)

    def names(self):
        return sorted(self.clusters)

    def shutdown(self, cluster_name=None):
        '''
        Shut down and forget the cluster with the given name, or all clusters
        if no name is given.
        '''
        with self._lock:
            if cluster_name is None:
                clusters = list(self.clusters.items())
                self.clusters.clear()
            else:
                cluster = self.clusters.pop(cluster_name, None)
                clusters = [(cluster_name, cluster)] if cluster is not None else []
        for name, cluster in clusters:
            logger.info('Shutting down cluster %s', name)
            cluster.shutdown()

    def __contains__(self, cluster_name):
        return cluster_name in self.clusters

    def __repr__(self):
        return '<ClusterRegistry %s>' % ', '.join(self.names())


_registry = None
_registry_lock = Lock()


def default_registry():
    '''
    The registry shared by all factories which aren't given one, so that
    clusters are shared by name throughout the process.
    '''
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ClusterRegistry()
        return _registry
