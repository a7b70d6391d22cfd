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
Named resources: references carrying string attributes, declared in XML and
bound in a :class:`Context` which resolves them through their factory.

A declaration looks like::

    <Context>
        <Resource name="cassandra/Keyspace1"
                  auth="Container"
                  type="cassres.cassandra.keyspace.KeyspaceHandle"
                  factory="cassres.cassandra.factory.KeyspaceResourceFactory"
                  hosts="cass1:9042,cass2:9042,cass3:9042"
                  keyspace="Keyspace1"
                  clusterName="Test Cluster"
                  maxActive="20"
                  autoDiscoverHosts="true"
                  runAutoDiscoveryAtStartup="true"/>
    </Context>
'''

from threading import Lock
import importlib
import logging
import xml.etree.ElementTree as ET

from cassres.exceptions import ConfigurationError, NameNotFoundError


logger = logging.getLogger(__name__)


# attributes of a Resource element which aren't passed on as RefAddr
RESOURCE_ATTRIBUTES = ('name', 'type', 'factory', 'auth')


class RefAddr(object):
    '''
    A single named attribute of a reference. Content is a string or None.
    '''
    __slots__ = ('addr_type', 'content')

    def __init__(self, addr_type, content=None):
        self.addr_type = addr_type
        self.content = content

    def __eq__(self, other):
        return (isinstance(other, RefAddr) and
                self.addr_type == other.addr_type and
                self.content == other.content)

    def __hash__(self):
        return hash((self.addr_type, self.content))

    def __repr__(self):
        return '<RefAddr %s=%r>' % (self.addr_type, self.content)


class Reference(object):
    def __init__(self, class_name, factory=None, addrs=()):
        '''
        A reference to an object which is to be created by a factory.

        :param class_name: str
            The (dotted) name of the type of the object referenced.
        :param factory: str or None
            Dotted import path of the factory class which creates the object.
        :param addrs: iterable of RefAddr
            The attributes of the reference, in declaration order.
        '''
        self.class_name = class_name
        self.factory = factory
        self._addrs = []
        for addr in addrs:
            self.add(addr)

    @classmethod
    def from_mapping(cls, class_name, attributes, factory=None):
        return cls(class_name, factory, (RefAddr(k, v) for k, v in attributes.items()))

    def add(self, addr):
        if not isinstance(addr, RefAddr):
            raise TypeError('%r is not a RefAddr' % (addr,))
        self._addrs.append(addr)

    def get(self, addr_type):
        '''
        The first RefAddr with the given type or None if there is none.
        '''
        for addr in self._addrs:
            if addr.addr_type == addr_type:
                return addr
        return None

    def __iter__(self):
        return iter(self._addrs)

    def __len__(self):
        return len(self._addrs)

    def __repr__(self):
        return '<Reference %s factory=%s addrs=%r>' % (self.class_name, self.factory, self._addrs)


def _parse_xml(source):
    try:
        if isinstance(source, str) and source.lstrip().startswith('<'):
            return ET.fromstring(source)
        else:
            return ET.parse(source).getroot()
    except ET.ParseError as exc:
        raise ConfigurationError('Unable to parse resource declarations: %s' % exc) from exc


def parse_resources(source):
    '''
    Read Resource declarations from XML.

    Attributes other than name, type, factory and auth become the RefAddr of
    the reference. Parameters in a ResourceParams element are added to the
    resource with the same name.

    :param source: str or file object
        A path, an open file or the XML document itself.
    :return: [(name, Reference), ...] in declaration order.
    '''
    root = _parse_xml(source)
    resources = {}
    for element in root.iter('Resource'):
        name = element.get('name')
        factory = element.get('factory')
        if not name:
            raise ConfigurationError('Resource declared without a name')
        if not factory:
            raise ConfigurationError('Resource %s declared without a factory' % name)
        if name in resources:
            raise ConfigurationError('Resource %s declared more than once' % name)
        resources[name] = Reference(element.get('type'), factory, (
            RefAddr(key, value)
            for key, value in element.attrib.items()
            if key not in RESOURCE_ATTRIBUTES
        ))

    for params in root.iter('ResourceParams'):
        name = params.get('name')
        try:
            reference = resources[name]
        except KeyError:
            raise ConfigurationError('ResourceParams for undeclared resource %s' % name)
        for parameter in params.iter('parameter'):
            key = parameter.findtext('name')
            if not key:
                raise ConfigurationError('Parameter without a name in ResourceParams of %s' % name)
            reference.add(RefAddr(key.strip(), parameter.findtext('value')))

    return list(resources.items())


def load_factory(path):
    '''
    Import a factory class by its dotted path.
    '''
    module_name, _, attr = path.rpartition('.')
    if not module_name:
        raise ConfigurationError('Factory %r is not a dotted path' % path)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError('Unable to import factory %s' % path) from exc
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError('Factory %s not found in %s' % (attr, module_name)) from exc


class Context(object):
    def __init__(self, **factory_kwargs):
        '''
        Names bound to references.

        :param factory_kwargs:
            Keyword arguments for the factories instantiated by this context,
            e.g. a ClusterRegistry shared by all keyspace resources:
            ``Context(registry=ClusterRegistry())``.
        '''
        self.factory_kwargs = factory_kwargs
        self._bindings = {}
        self._factories = {}
        self._lock = Lock()

    def bind(self, name, reference):
        with self._lock:
            if name in self._bindings:
                raise ConfigurationError('%s is already bound' % name)
            self._bindings[name] = reference

    def rebind(self, name, reference):
        with self._lock:
            self._bindings[name] = reference
            self._factories.pop(name, None)

    def unbind(self, name):
        with self._lock:
            self._bindings.pop(name, None)
            self._factories.pop(name, None)

    def list(self):
        return sorted(self._bindings)

    def load(self, source):
        '''
        Bind the resources declared in source (see parse_resources).
        :return: The names bound.
        '''
        names = []
        for name, reference in parse_resources(source):
            self.bind(name, reference)
            names.append(name)
        logger.debug('Bound resources %s', ', '.join(names))
        return names

    def _get_factory(self, name, reference):
        with self._lock:
            factory = self._factories.get(name)
            if factory is None:
                if not reference.factory:
                    raise ConfigurationError('No factory for resource %s' % name)
                factory = load_factory(reference.factory)(**self.factory_kwargs)
                self._factories[name] = factory
            return factory

    def lookup(self, name):
        '''
        Resolve the object bound to name through the factory of its reference.
        The factory is created once per bound name.
        '''
        try:
            reference = self._bindings[name]
        except KeyError:
            raise NameNotFoundError('Name %s is not bound' % name) from None
        if not isinstance(reference, Reference):
            return reference
        factory = self._get_factory(name, reference)
        return factory.resolve(reference, name, self)

    def __contains__(self, name):
        return name in self._bindings

    def __repr__(self):
        return '<Context %s>' % ', '.join(self.list())
