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

from cassres.util.conf import Bool, Int


# Configuration
default_port = Int(9042, desc='Port of the hosts given without one.')
compression = Bool(True, desc='Whether to compress traffic with the cluster.')
metrics_enabled = Bool(False, desc='Whether the driver collects metrics.')
protocol_version = Int(desc='Native protocol version, negotiated with the cluster if not set.')
connect_on_resolve = Bool(False, desc='Whether to connect the session of a keyspace when it is '
                                      'resolved instead of on first use.')
