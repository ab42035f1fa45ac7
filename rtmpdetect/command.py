# -*- test-case-name: rtmpdetect.tests.test_command -*-

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
Extraction of the application identifying properties of the C{connect}
command.

The first message a client sends after the handshake is an AMF0 invoke::

    "connect", <transaction id>, {"app": ..., "swfUrl": ..., "pageUrl": ...}
"""

from pyamf.util import BufferedByteStream

from rtmpdetect import amf0, chunk
from rtmpdetect.exc import CommandError


__all__ = [
    'ConnectCommand',
    'extract_connect',
]


#: Like remoting call, used for stream actions too
INVOKE = 0x14

CONNECT = 'connect'

SWF_URL = b'swfUrl'
PAGE_URL = b'pageUrl'


class ConnectCommand(object):
    """
    The interesting bits of a C{connect} command.

    @ivar swfUrl: The url of the SWF file that made the connection.
    @type swfUrl: C{str} or C{None}
    @ivar pageUrl: The url of the page the SWF file is embedded in.
    @type pageUrl: C{str} or C{None}
    """

    def __init__(self, swfUrl=None, pageUrl=None):
        self.swfUrl = swfUrl
        self.pageUrl = pageUrl

    def __repr__(self):
        return '<%s swfUrl=%r pageUrl=%r at 0x%x>' % (
            self.__class__.__name__, self.swfUrl, self.pageUrl, id(self))


def extract_connect(stream):
    """
    Reads one RTMP message from C{stream} and extracts the command object
    properties of the C{connect} command it must contain.

    @param stream: The client stream, positioned just after the handshake.
    @type stream: L{pyamf.util.BufferedByteStream}
    @rtype: L{ConnectCommand}
    @raise CommandError: The message is not a C{connect} invoke.
    @raise DecodeError: The message is malformed.
    """
    header = chunk.decode_message_header(stream)

    if header.datatype != INVOKE:
        raise CommandError('Expected AMF0 command message (got datatype '
            '%r)' % (header.datatype,))

    body = BufferedByteStream(chunk.read_body(stream, header))

    name = amf0.decode_string(body)

    if name != CONNECT:
        raise CommandError('Expected connect command (got %r)' % (name,))

    # the transaction id, its value is of no interest
    if body.remaining() < 9 or body.read_uchar() != amf0.TYPE_NUMBER:
        raise CommandError('Expected the transaction id')

    body.read(8)

    if body.remaining() < 1 or body.read_uchar() != amf0.TYPE_OBJECT:
        raise CommandError('Expected the command object')

    props = amf0.scan_object(body, (SWF_URL, PAGE_URL))

    return ConnectCommand(props.get(SWF_URL), props.get(PAGE_URL))
