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

"""
Meta data and helper functions for setup
"""

import os.path


_version = None



def set_version(version):
    global _version

    _version = version


def get_version():
    v = ''
    prev = None

    for x in _version:
        if prev is not None:
            if isinstance(x, int):
                v += '.'

        prev = x
        v += str(x)

    return v.strip('.')



def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()



def get_install_requirements():
    """
    Returns a list of dependencies for RTMPy Detect to function correctly on
    the target platform.
    """
    # Py3AMF is the Python 3 distribution of PyAMF, it installs `pyamf`
    return ['Twisted>=16.0', 'Py3AMF>=0.8', 'zope.interface>=4.0']



def get_test_requirements():
    """
    Returns a list of required packages to run the test suite.
    """
    return ['pytest']



def get_extras_require():
    return {
        'test': get_test_requirements(),
    }



def get_trove_classifiers():
    """
    Return a list of trove classifiers that are setup dependent.
    """
    classifiers = []

    def dev_status():
        version = get_version()

        if 'dev' in version:
            return 'Development Status :: 2 - Pre-Alpha'
        elif 'alpha' in version:
            return 'Development Status :: 3 - Alpha'
        elif 'beta' in version:
            return 'Development Status :: 4 - Beta'
        else:
            return 'Development Status :: 5 - Production/Stable'

    return classifiers + [dev_status()]
