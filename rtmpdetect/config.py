# -*- test-case-name: rtmpdetect.tests.test_config -*-

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
Detector configuration.

@since: 0.1
"""

from twisted.python import usage


__all__ = ['Config', 'Options']


#: Give up on a flow after this many packets without a verdict
DEFAULT_MAX_PACKETS = 15


def _positive_int(value):
    value = int(value)

    if value < 1:
        raise ValueError('Expected a positive integer (got %d)' % (value,))

    return value


class Options(usage.Options):
    """
    Command line options for the detector.
    """

    optParameters = [
        ['max-packets', 'm', DEFAULT_MAX_PACKETS,
            'Number of packets to inspect before giving up on a flow.',
            _positive_int],
    ]

    optFlags = [
        ['referred-disabled', None,
            'Do not record the page url as the referer.'],
        ['verbose', 'v', 'Log detection events to stdout.'],
    ]



class Config(object):
    """
    The settings the detector service reads.

    @ivar maxPackets: The packet budget per flow.
    @type maxPackets: C{int}
    @ivar referredDisabled: Whether detection of referring applications is
        disabled, in which case the page url is dropped.
    @type referredDisabled: C{bool}
    """

    def __init__(self, maxPackets=DEFAULT_MAX_PACKETS, referredDisabled=False):
        self.maxPackets = maxPackets
        self.referredDisabled = referredDisabled

    def __repr__(self):
        return '<%s maxPackets=%r referredDisabled=%r>' % (
            self.__class__.__name__, self.maxPackets, self.referredDisabled)

    @classmethod
    def fromOptions(cls, options):
        """
        Builds a config from parsed L{Options}.
        """
        return cls(maxPackets=options['max-packets'],
            referredDisabled=bool(options['referred-disabled']))
