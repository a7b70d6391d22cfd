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

import logging.config
import os.path

from cassres.util.conf import Config


_conf = None


def get_conf():
    '''
    The process wide configuration, read from the cassres.ini files and the
    CASSRES_CONF environment variable on first use.
    '''
    global _conf
    if _conf is None:
        _conf = Config()
    return _conf


if os.path.exists('logging.conf'):
    logging.config.fileConfig('logging.conf', disable_existing_loggers=False)


__version_info__ = (0, 1, 0)
__version__ = '.'.join(map(str, __version_info__))
