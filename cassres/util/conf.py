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

from collections.abc import Iterable
from configparser import ConfigParser, Error as ConfigParserError
from functools import lru_cache
import importlib
import os
import re
import shlex
import sys

from cassres.exceptions import ConfigurationError


CASSRES_ENV_KEY = 'CASSRES_CONF'
_NOT_SET = object()


class Config(object):
    '''
    Configuration values keyed by the dotted path of the module level
    :class:`Setting` they configure, e.g. ``cassres.cassandra.default_port``.

    Values are read from (in increasing order of precedence) the cassres.ini
    files in the home and working directory, the CASSRES_CONF environment
    variable and the values given to the constructor.
    '''

    def __init__(self, values=None, use_environment=True, **kwargs):
        if use_environment:
            self.values = {}

            # read from .cassres.ini files
            config = ConfigParser()
            try:
                config.read([
                    os.path.expanduser('~/.cassres.ini'),
                    os.path.expanduser('~/cassres.ini'),
                    './.cassres.ini',
                    './cassres.ini',
                ])
            except ConfigParserError as exc:
                raise ConfigurationError('Unable to read cassres.ini: %s' % exc) from exc
            for section in config.sections():
                for key, value in config[section].items():
                    self.values['%s.%s' % (section, key)] = value

            # read from CASSRES_CONF environment variable
            env_config = os.environ.get(CASSRES_ENV_KEY, '')
            for option in shlex.split(env_config):
                option = option.split('=', 1)
                if len(option) != 2:
                    raise ConfigurationError('%s not in key=value format in %s environment variable'
                                             % (option[0], CASSRES_ENV_KEY))
                self[option[0]] = option[1]

            if values:
                # override with config provided through the constructor
                self.values.update(values)
        else:
            self.values = dict(values or {})

        if kwargs:
            self.values.update(kwargs)


    @lru_cache(1024)
    def _get_setting(self, key):
        pkg, *attr = key.rsplit('.', 1)
        if attr:
            attr = attr[0]
            mod = sys.modules.get(pkg)
            if not mod:
                try:
                    mod = importlib.import_module(pkg)
                except ImportError:
                    return None
            setting = getattr(mod, attr, None)
            if isinstance(setting, Setting):
                return setting

    def get(self, key, fmt=None, default=_NOT_SET):
        setting = self._get_setting(key)
        value = self.values.get(key, _NOT_SET)
        if value is _NOT_SET:
            if setting and default is _NOT_SET:
                default = setting.default
            if default is not _NOT_SET:
                return default
            else:
                return None
        elif fmt is not None:
            try:
                return fmt(value)
            except ValueError as exc:
                raise ConfigurationError('Invalid value %r for %s: %s' % (value, key, exc)) from exc
        elif setting:
            return setting.coerce(value, key)
        else:
            return value

    def get_int(self, *args, **kwargs):
        return self.get(*args, fmt=int, **kwargs)

    def get_bool(self, *args, **kwargs):
        return self.get(*args, fmt=Bool().fmt, **kwargs)

    def get_str(self, *args, **kwargs):
        return self.get(*args, fmt=str, **kwargs)

    def is_set(self, key):
        return key in self.values

    def set(self, key, value):
        self.values[key] = value
        return self

    def update(self, *args, **kwargs):
        for arg in args:
            if isinstance(arg, tuple):
                if len(arg) != 2:
                    raise ConfigurationError('%r is not a (key, value) pair' % (arg,))
                self.set(*arg)
            elif isinstance(arg, str):
                try:
                    key, value = arg.split('=', 1)
                except ValueError:
                    raise ConfigurationError('%r is not formatted as "key=value"' % arg)
                self.set(key.strip(), value.strip())
            else:
                raise ConfigurationError('Unable to update configuration with %r' % (arg,))
        self.values.update(kwargs)

    __getitem__ = get
    __setitem__ = set

    def __repr__(self):
        return '<Conf %r>' % self.values

    def __reduce__(self):
        return Config, (self.values, False)


class Setting(object):
    '''
    A typed configuration value with a default. Declared at module level, the
    dotted path of the module attribute is the key of the setting in a
    :class:`Config`.
    '''
    default = None
    desc = None

    def __init__(self, default=_NOT_SET, fmt=None, desc=None):
        if default is not _NOT_SET:
            self.default = default
            if desc:
                desc += ' Defaults to %r.' % default
        self.desc = desc
        self.__doc__ = desc
        if fmt is not None:
            assert callable(fmt)
            self.fmt = fmt

    def fmt(self, v):
        return v

    def coerce(self, value, key=None):
        '''
        Coerce value with fmt, raising a ConfigurationError which names key if
        the value isn't acceptable.
        '''
        try:
            return self.fmt(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError('Invalid value %r for %s: %s' % (value, key or 'setting', exc)) from exc


class String(Setting):
    def fmt(self, v):
        if not isinstance(v, str):
            raise ValueError('not a string')
        return v


class Bool(Setting):
    def fmt(self, v):
        if type(v) is bool:
            return v
        elif v == 'true':
            return True
        elif v == 'false':
            return False
        else:
            raise ValueError('expected "true" or "false"')


_INTEGER = re.compile(r'^[+-]?[0-9]+$')


class Int(Setting):
    bits = 32

    def fmt(self, v):
        if type(v) is int:
            value = v
        elif isinstance(v, str) and _INTEGER.match(v):
            value = int(v)
        else:
            raise ValueError('not an integer')
        limit = 2 ** (self.bits - 1)
        if not -limit <= value < limit:
            raise ValueError('out of range for a %s bit integer' % self.bits)
        return value


class Long(Int):
    bits = 64


class CSV(String):
    def fmt(self, v):
        if isinstance(v, Iterable) and not isinstance(v, str):
            return list(v)
        return list(e.strip() for e in super().fmt(v).split(','))
