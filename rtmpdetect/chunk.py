# -*- test-case-name: rtmpdetect.tests.test_chunk -*-

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
Decoding of RTMP chunk headers and reassembly of a chunked message body.

Only what is needed to read the first message a client sends after the
handshake is supported. The chunk size has not been negotiated at that point
so it is always L{FRAME_SIZE}.

@see: U{RTMP Packet Structure on OSFlash<http://osflash.org/documentation/rtmp
    #rtmp_packet_structure>}
"""

from rtmpdetect.exc import DecodeError


__all__ = [
    'Header',
    'decode_basic_header',
    'decode_message_header',
    'read_body',
]


#: The default number of bytes per RTMP frame (excluding header)
FRAME_SIZE = 128

#: Header formats, the top 2 bits of the first header byte
FULL_HEADER = 0
SAME_STREAM = 1
TIMESTAMP_ONLY = 2
CONTINUATION = 3

#: Number of message header bytes following the basic header, by format
MESSAGE_HEADER_SIZES = {
    FULL_HEADER: 11,
    SAME_STREAM: 7,
}


class Header(object):
    """
    The parts of an RTMP message header that we care about.

    @ivar channelId: The chunk stream id.
    @ivar datatype: The RTMP message type.
    @ivar bodyLength: The length of the (unchunked) message body.
    """

    __slots__ = ('channelId', 'datatype', 'bodyLength')

    def __init__(self, channelId, datatype=-1, bodyLength=-1):
        self.channelId = channelId
        self.datatype = datatype
        self.bodyLength = bodyLength

    def __repr__(self):
        attrs = []

        for k in self.__slots__:
            v = getattr(self, k, None)

            if v == -1:
                v = None

            attrs.append('%s=%r' % (k, v))

        return '<%s.%s %s at 0x%x>' % (
            self.__class__.__module__,
            self.__class__.__name__,
            ' '.join(attrs),
            id(self))


def decode_basic_header(stream):
    """
    Reads the chunk basic header.

    The chunk stream id can be encoded in up to 3 bytes::

        2 <= channelId < 64: the low 6 bits of the first byte
        64 <= channelId < 320: 0, channelId - 64
        320 <= channelId < 65600: 1, channelId - 64 (2 bytes, low byte first)

    @param stream: The byte stream to read the header from.
    @type stream: L{pyamf.util.BufferedByteStream}
    @return: The header format and the chunk stream id.
    @rtype: C{tuple}
    @raise DecodeError: Not enough bytes for the encoding.
    """
    if stream.remaining() < 1:
        raise DecodeError('Missing chunk basic header')

    channelId = stream.read_uchar()
    fmt = channelId >> 6
    channelId &= 0x3f

    if channelId == 0:
        if stream.remaining() < 1:
            raise DecodeError('Truncated chunk basic header')

        channelId = stream.read_uchar() + 64
    elif channelId == 1:
        if stream.remaining() < 2:
            raise DecodeError('Truncated chunk basic header')

        channelId = stream.read_uchar() + 64
        channelId += stream.read_uchar() << 8

    return fmt, channelId


def decode_message_header(stream):
    """
    Reads the basic header and the message header of the first chunk of a
    message.

    Only full (format 0) and same stream (format 1) headers carry the body
    length and message type, anything else is rejected. The timestamp and
    the stream id are skipped.

    @param stream: The byte stream to read the header from.
    @type stream: L{pyamf.util.BufferedByteStream}
    @rtype: L{Header}
    @raise DecodeError: Unsupported format or not enough bytes.
    """
    fmt, channelId = decode_basic_header(stream)

    try:
        size = MESSAGE_HEADER_SIZES[fmt]
    except KeyError:
        raise DecodeError('Unexpected chunk format %d for a message '
            'header' % (fmt,))

    if stream.remaining() < size:
        raise DecodeError('Truncated message header (need %d bytes, got '
            '%d)' % (size, stream.remaining()))

    header = Header(channelId)

    # timestamp
    stream.read(3)

    header.bodyLength = stream.read_24bit_uint()
    header.datatype = stream.read_uchar()

    # the rest of the header (the stream id for a full header)
    stream.read(size - 7)

    return header


def read_body(stream, header, frameSize=FRAME_SIZE):
    """
    Reassembles the body of the message described by C{header}.

    The body is split into frames of C{frameSize} bytes, each frame after the
    first must be introduced by a continuation header for the same chunk
    stream.

    @param stream: The byte stream positioned at the start of the body.
    @type stream: L{pyamf.util.BufferedByteStream}
    @param header: The decoded message header.
    @type header: L{Header}
    @return: The complete message body.
    @rtype: C{bytes}
    @raise DecodeError: A frame is truncated or a continuation header does not
        match.
    """
    body = bytearray()
    remaining = header.bodyLength

    while remaining > 0:
        l = min(remaining, frameSize)

        if stream.remaining() < l:
            raise DecodeError('Truncated chunk (need %d bytes, got %d)' % (
                l, stream.remaining()))

        body.extend(stream.read(l))
        remaining -= l

        if remaining == 0:
            break

        fmt, channelId = decode_basic_header(stream)

        if fmt != CONTINUATION:
            raise DecodeError('Expected continuation chunk (got format '
                '%d)' % (fmt,))

        if channelId != header.channelId:
            raise DecodeError('channelId mismatch on continuation '
                'expected=%r, got=%r' % (header.channelId, channelId))

    return bytes(body)
