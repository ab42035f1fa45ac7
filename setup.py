#!/usr/bin/env python

# Copyright the RTMPy Project
#
# RTMPy is free software: you can redistribute it and/or modify it under the
# terms of the GNU Lesser General Public License as published by the Free
# Software Foundation, either version 2.1 of the License, or (at your option)
# any later version.
#
# RTMPy is distributed in the hope that it will be useful, but WITHOUT ANY
# WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE.  See the GNU Lesser General Public License for more
# details.
#
# You should have received a copy of the GNU Lesser General Public License along
# with RTMPy.  If not, see <http://www.gnu.org/licenses/>.

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import setupinfo
from setuptools import setup, find_packages


version = (0, 1, 0)

name = "RTMPyDetect"
description = "Passive detection of RTMP connections"
long_description = setupinfo.read('README.txt')
url = "http://rtmpy.org"
author = "The RTMPy Project"
author_email = "rtmpy-dev@rtmpy.org"
license = "LGPL 2.1 License"

classifiers = """
Framework :: Twisted
Natural Language :: English
Intended Audience :: Developers
Intended Audience :: Information Technology
License :: OSI Approved :: GNU Library or Lesser General Public License (LGPL)
Operating System :: OS Independent
Programming Language :: Python
Programming Language :: Python :: 3
Topic :: Software Development :: Libraries :: Python Modules
Topic :: System :: Networking :: Monitoring
"""

keywords = """
rtmp amf amf0 flash swf handshake passive detection fingerprint traffic
inspection pcap wireshark
"""


def setup_package():
    setupinfo.set_version(version)

    setup(
        name=name,
        version=setupinfo.get_version(),
        description=description,
        long_description=long_description,
        url=url,
        author=author,
        author_email=author_email,
        keywords=keywords.strip(),
        license=license,
        packages=find_packages(include=['rtmpdetect', 'rtmpdetect.*']),
        install_requires=setupinfo.get_install_requirements(),
        extras_require=setupinfo.get_extras_require(),
        entry_points={
            'console_scripts': [
                'rtmpdetect-dump = rtmpdetect.scripts.parse_dump:main',
            ],
        },
        zip_safe=True,
        python_requires='>=3.6',
        classifiers=(list(filter(None, classifiers.split('\n'))) +
            setupinfo.get_trove_classifiers()),
    )


if __name__ == '__main__':
    setup_package()
