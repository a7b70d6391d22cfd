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

import argparse
import sys

from cassres.cassandra.factory import KeyspaceResourceFactory, parse_reference
from cassres.exceptions import ResourceError
from cassres.naming import parse_resources
from cassres.util.conf import Config
import cassres


KEYSPACE_FACTORY = '%s.%s' % (KeyspaceResourceFactory.__module__, KeyspaceResourceFactory.__name__)


argparser = argparse.ArgumentParser(prog='cassres-check',
                                    description='Check the keyspace resources declared in a '
                                                'context file without connecting to Cassandra.')
argparser.add_argument('context', help='The XML file with the Resource declarations.')
argparser.add_argument('names', nargs='*', help='The resources to check (defaults to all).')
argparser.add_argument('--conf', nargs='*', default=(),
                       help='cassres configuration in "key=value" format')


def check(references, conf, out=sys.stdout):
    '''
    Parse each keyspace reference and report on out.
    :return: The number of references which failed.
    '''
    failed = 0
    for name, reference in references:
        try:
            resource = parse_reference(reference, conf)
        except ResourceError as exc:
            failed += 1
            print('%s: %s' % (name, exc), file=out)
        else:
            print('%s: keyspace %s on cluster %s' % (name, resource.keyspace_name, resource.cluster_name),
                  file=out)
            print('    %r' % (resource.configurator,), file=out)
    return failed


def main(args=None, out=sys.stdout, conf=None):
    args = argparser.parse_args(args)

    # overrides from the command line apply to this check only
    conf = Config(dict((conf or cassres.get_conf()).values), use_environment=False)
    try:
        conf.update(*args.conf)
        references = [
            (name, reference)
            for name, reference in parse_resources(args.context)
            if reference.factory == KEYSPACE_FACTORY
            if not args.names or name in args.names
        ]
    except (ResourceError, OSError) as exc:
        print('Unable to read %s: %s' % (args.context, exc), file=out)
        return 1

    missing = set(args.names) - set(name for name, _ in references)
    for name in sorted(missing):
        print('%s: no keyspace resource declared with this name' % name, file=out)

    failed = check(references, conf, out)
    return 1 if failed or missing else 0


if __name__ == '__main__':
    sys.exit(main())
