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
Helpers to build the byte streams the tests feed to the detector.
"""

from pyamf.util import BufferedByteStream


HANDSHAKE_LENGTH = 1536

SWF_URL = 'http://example.com/a.swf'
PAGE_URL = 'http://example.com/page.html'


def generateBlock(fill=b'\x5a'):
    return fill * HANDSHAKE_LENGTH


def firstPacket(version=3, fill=b'\x5a'):
    """
    C0 + C1 (or S0 + S1).
    """
    return bytes(bytearray([version])) + generateBlock(fill)


def encodeString(value, typed=True):
    if not isinstance(value, bytes):
        value = value.encode('utf-8')

    s = BufferedByteStream()

    if typed:
        s.write_uchar(0x02)

    s.write_ushort(len(value))
    s.write(value)

    return s.getvalue()


def encodeNumber(value):
    s = BufferedByteStream()

    s.write_uchar(0x00)
    s.write_double(float(value))

    return s.getvalue()


def encodeBool(value):
    return b'\x01' + (b'\x01' if value else b'\x00')


def encodeObject(props, typed=True):
    """
    Encodes a flat AMF0 object.

    @param props: A list of (key, encoded value) pairs, in order.
    """
    s = BufferedByteStream()

    if typed:
        s.write_uchar(0x03)

    for k, v in props:
        s.write(encodeString(k, typed=False))
        s.write(v)

    s.write(b'\x00\x00\x09')

    return s.getvalue()


def connectBody(props=None, name='connect', transactionId=1.0):
    """
    The AMF0 body of a connect invoke.
    """
    if props is None:
        props = [
            ('app', encodeString('live')),
            ('swfUrl', encodeString(SWF_URL)),
            ('tcUrl', encodeString('rtmp://example.com/live')),
            ('fpad', encodeBool(False)),
            ('audioCodecs', encodeNumber(3575)),
            ('pageUrl', encodeString(PAGE_URL)),
        ]

    return (encodeString(name) + encodeNumber(transactionId) +
        encodeObject(props))


def basicHeader(fmt, channelId):
    s = BufferedByteStream()

    if channelId < 64:
        s.write_uchar((fmt << 6) | channelId)
    elif channelId < 320:
        s.write_uchar(fmt << 6)
        s.write_uchar(channelId - 64)
    else:
        channelId -= 64

        s.write_uchar((fmt << 6) | 1)
        s.write_uchar(channelId & 0xff)
        s.write_uchar(channelId >> 8)

    return s.getvalue()


def chunkMessage(body, channelId=3, datatype=0x14, fmt=0, frameSize=128,
                 continuationId=None):
    """
    Frames C{body} as an RTMP message.

    @param continuationId: The chunk stream id to use on continuation headers,
        defaults to C{channelId}.
    """
    if continuationId is None:
        continuationId = channelId

    s = BufferedByteStream()

    s.write(basicHeader(fmt, channelId))
    s.write_24bit_uint(0)
    s.write_24bit_uint(len(body))
    s.write_uchar(datatype)

    if fmt == 0:
        # stream id, little endian
        s.write(b'\x00\x00\x00\x00')

    for i in range(0, len(body), frameSize):
        if i > 0:
            s.write(basicHeader(3, continuationId))

        s.write(body[i:i + frameSize])

    return s.getvalue()


def clientStream(body=None, version=3):
    """
    Everything a client sends: C0, C1, C2 and the connect message.
    """
    if body is None:
        body = connectBody()

    return (firstPacket(version, b'c') + generateBlock(b'C') +
        chunkMessage(body))


def serverStream(version=3):
    """
    Everything a server sends: S0, S1 and S2.
    """
    return firstPacket(version, b's') + generateBlock(b'S')


def fragments(data, size):
    """
    Splits C{data} into pieces of at most C{size} bytes.
    """
    return [data[i:i + size] for i in range(0, len(data), size)]
