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

from cassres.exceptions import ConfigurationError
from cassres.util.conf import CSV


class CassandraHost(object):
    __slots__ = ('address', 'port')

    def __init__(self, address, port):
        self.address = address
        self.port = port

    def __eq__(self, other):
        return (isinstance(other, CassandraHost) and
                self.address == other.address and
                self.port == other.port)

    def __hash__(self):
        return hash((self.address, self.port))

    def __repr__(self):
        return '%s:%s' % (self.address, self.port)


def parse_host(host, default_port):
    address, sep, port = host.rpartition(':')
    if sep and address.startswith('[') and address.endswith(']'):
        address = address[1:-1]
    elif not sep or ':' in address:
        # no port, or an IPv6 address without brackets
        address, port = host.strip('[]'), default_port
    if not isinstance(port, int):
        try:
            port = int(port)
        except ValueError:
            raise ConfigurationError('Invalid port in host %r' % host) from None
    if not address:
        raise ConfigurationError('No address in host %r' % host)
    if not 0 < port < 65536:
        raise ConfigurationError('Port of host %r out of range' % host)
    return CassandraHost(address, port)


def parse_hosts(hosts, default_port):
    '''
    Parse a comma separated list of host[:port] or a sequence of such strings.

    :return: [CassandraHost, ...]
    '''
    if not hosts:
        raise ConfigurationError('No hosts given')
    entries = CSV().coerce(hosts, 'hosts')
    if not all(entries):
        raise ConfigurationError('Empty entry in hosts %r' % (hosts,))
    return [parse_host(entry.strip(), default_port) for entry in entries]


class HostConfigurator(object):
    '''
    The configuration of the connections with a cluster. Options not given
    keep the defaults below.
    '''

    # connection pool
    max_active = 50
    max_wait_time_when_exhausted = -1
    lifo = True

    # transport
    use_thrift_framed_transport = True
    max_frame_size = 2 ** 31 - 1
    use_socket_keepalive = False
    max_connect_time_millis = -1
    max_last_success_time_millis = -1
    cassandra_thrift_socket_timeout = 0

    # host discovery
    auto_discover_hosts = False
    run_auto_discovery_at_startup = False
    auto_discovery_delay_in_seconds = 30

    # downed hosts
    retry_downed_hosts = True
    retry_downed_hosts_delay_in_seconds = 10
    retry_downed_hosts_queue_size = -1

    # host timeouts
    use_host_timeout_tracker = False
    host_timeout_counter = 10
    host_timeout_suspension_duration_in_seconds = 10
    host_timeout_unsuspend_check_delay = 10
    host_timeout_window = 500

    OPTIONS = (
        'max_active',
        'max_wait_time_when_exhausted',
        'lifo',
        'use_thrift_framed_transport',
        'max_frame_size',
        'use_socket_keepalive',
        'max_connect_time_millis',
        'max_last_success_time_millis',
        'cassandra_thrift_socket_timeout',
        'auto_discover_hosts',
        'run_auto_discovery_at_startup',
        'auto_discovery_delay_in_seconds',
        'retry_downed_hosts',
        'retry_downed_hosts_delay_in_seconds',
        'retry_downed_hosts_queue_size',
        'use_host_timeout_tracker',
        'host_timeout_counter',
        'host_timeout_suspension_duration_in_seconds',
        'host_timeout_unsuspend_check_delay',
        'host_timeout_window',
    )

    def __init__(self, hosts, default_port=9042, **options):
        '''
        :param hosts: str or sequence of str
            Comma separated host[:port] entries.
        :param default_port: int
            The port of hosts given without one.
        :param options:
            Any of HostConfigurator.OPTIONS.
        '''
        self.hosts = parse_hosts(hosts, default_port)
        for key, value in options.items():
            if key not in self.OPTIONS:
                raise TypeError('Unknown host configuration option %r' % key)
            setattr(self, key, value)

    @property
    def addresses(self):
        return [host.address for host in self.hosts]

    def options(self):
        return {key: getattr(self, key) for key in self.OPTIONS}

    def __repr__(self):
        return 'HostConfigurator<hosts=%s, %s>' % (
            ','.join(map(repr, self.hosts)),
            ', '.join('%s=%r' % (key, getattr(self, key)) for key in self.OPTIONS),
        )
