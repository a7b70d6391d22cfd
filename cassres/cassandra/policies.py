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

import socket

from cassandra.policies import ConstantReconnectionPolicy, HostDistance, ReconnectionPolicy, \
    RoundRobinPolicy


class NoReconnectionPolicy(ReconnectionPolicy):
    '''
    Never attempt to reconnect with a host which went down.
    '''
    def new_schedule(self):
        return iter(())


class ContactPointsOnlyPolicy(RoundRobinPolicy):
    '''
    Round robin over the configured contact points only, hosts discovered in
    the cluster are ignored. Host names are resolved when the policy is
    populated, i.e. when the cluster connects.
    '''
    def __init__(self, contact_points):
        super().__init__()
        self._contact_points = tuple(contact_points)
        self._addresses = frozenset()

    def _resolve(self):
        addresses = set()
        for contact_point in self._contact_points:
            # hosts created from the contact points carry the address as given
            addresses.add(contact_point)
            try:
                infos = socket.getaddrinfo(contact_point, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
            except socket.gaierror:
                continue
            addresses.update(info[4][0] for info in infos)
        return frozenset(addresses)

    def _allowed(self, host):
        return host.address in self._addresses

    def populate(self, cluster, hosts):
        self._addresses = self._resolve()
        super().populate(cluster, [host for host in hosts if self._allowed(host)])

    def distance(self, host):
        if self._allowed(host):
            return HostDistance.LOCAL
        else:
            return HostDistance.IGNORED

    def on_up(self, host):
        if self._allowed(host):
            super().on_up(host)

    def on_add(self, host):
        if self._allowed(host):
            super().on_add(host)


def reconnection_policy(configurator):
    '''
    The policy for reconnecting with downed hosts: a constant delay with at
    most retry_downed_hosts_queue_size attempts (unbounded if not positive), or
    no reconnection at all if retrying downed hosts is disabled.
    '''
    if not configurator.retry_downed_hosts:
        return NoReconnectionPolicy()
    max_attempts = configurator.retry_downed_hosts_queue_size
    return ConstantReconnectionPolicy(
        configurator.retry_downed_hosts_delay_in_seconds,
        max_attempts=max_attempts if max_attempts > 0 else None,
    )
