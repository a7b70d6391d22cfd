#!/usr/bin/env python

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


from setuptools import setup, find_packages

import cassres


install_requires = [
    'cassandra-driver>=3.21',
]


dev_requires = [
    'pytest',
    'pytest-cov',
    'pylint',
    'flake8',
]


if __name__ == '__main__':
    setup(
        name='cassres',
        version=cassres.__version__,
        description='Cassandra keyspaces as named, declaratively configured resources',
        long_description=open('README.rst').read(),

        packages=(
            find_packages()
        ),

        include_package_data=True,
        zip_safe=False,

        install_requires=install_requires,
        extras_require=dict(
            dev=dev_requires,
        ),

        entry_points=dict(
            console_scripts=[
                'cassres-check = cassres.check:main',
            ],
        ),

        classifiers=[
            'Development Status :: 3 - Alpha',
            'Intended Audience :: Developers',
            'Operating System :: OS Independent',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
        ],
    )
