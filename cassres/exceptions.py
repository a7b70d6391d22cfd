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

class ResourceError(Exception):
    '''
    Base class of the errors raised while resolving a resource.
    '''


class InvalidInputError(ResourceError, TypeError):
    '''
    Raised when an object handed to a resource factory is not a
    :class:`cassres.naming.Reference`.
    '''


class ConfigurationError(ResourceError, ValueError):
    '''
    Raised when a required attribute is missing or when a value can't be
    coerced to the type of its setting. The coercion error, if any, is
    available as __cause__.
    '''


class NameNotFoundError(ResourceError, LookupError):
    '''
    Raised by a :class:`cassres.naming.Context` on lookup of a name which isn't
    bound.
    '''
