# -*- test-case-name: rtmpdetect.tests.test_amf0 -*-

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
The small subset of AMF0 needed to read the command object of an RTMP
C{connect} command.

Only Number, Boolean and String values can be skipped and only String values
can be decoded. The command object is the only Object we ever look into, it is
scanned as a flat list of properties.

All functions work on a L{pyamf.util.BufferedByteStream} and check the number
of bytes remaining before every read. They raise L{DecodeError} on anything
they do not understand, the stream position is undefined afterwards.

@see: U{AMF0 specification<http://opensource.adobe.com/wiki/download/
    attachments/1114283/amf0_spec_121207.pdf>}
"""

from rtmpdetect.exc import DecodeError


__all__ = [
    'decode_string',
    'skip_value',
    'scan_object',
]


#: IEEE 754 double, 8 bytes big endian
TYPE_NUMBER = 0x00
#: A single byte, zero is false
TYPE_BOOL = 0x01
#: 2 byte big endian length followed by that many bytes
TYPE_STRING = 0x02
#: Anonymous object, a list of key/value pairs
TYPE_OBJECT = 0x03
#: Object terminator, preceded by an empty key
TYPE_OBJECTTERM = 0x09


def _require(stream, length):
    if stream.remaining() < length:
        raise DecodeError('Expected %d bytes but only %d remain' % (
            length, stream.remaining()))


def decode_string(stream):
    """
    Reads a typed AMF0 string from C{stream}.

    Empty strings are not accepted, a property we care about must have a
    value.

    @param stream: The stream positioned at the type byte.
    @type stream: L{pyamf.util.BufferedByteStream}
    @return: The decoded string. Bytes that are not valid UTF-8 are kept as
        surrogates and come back with C{encode("utf-8", "surrogateescape")}.
    @rtype: C{str}
    @raise DecodeError: The value is not a string, is empty or is truncated.
    """
    _require(stream, 3)

    marker = stream.read_uchar()

    if marker != TYPE_STRING:
        raise DecodeError('Expected AMF0 string (got type 0x%02x)' % (
            marker,))

    length = stream.read_ushort()

    if length == 0:
        raise DecodeError('Unexpected empty AMF0 string')

    _require(stream, length)

    return stream.read(length).decode('utf-8', 'surrogateescape')


def skip_value(stream):
    """
    Skips over one typed AMF0 value.

    @param stream: The stream positioned at the type byte.
    @type stream: L{pyamf.util.BufferedByteStream}
    @raise DecodeError: Unsupported type or not enough data.
    """
    _require(stream, 1)

    marker = stream.read_uchar()

    if marker == TYPE_NUMBER:
        _require(stream, 8)
        stream.read(8)
    elif marker == TYPE_BOOL:
        _require(stream, 1)
        stream.read(1)
    elif marker == TYPE_STRING:
        _require(stream, 2)
        length = stream.read_ushort()

        _require(stream, length)
        stream.read(length)
    else:
        raise DecodeError('Cannot skip AMF0 type 0x%02x' % (marker,))


def scan_object(stream, keys):
    """
    Walks the properties of an AMF0 object, collecting the string values of
    C{keys}.

    Keys are matched exactly. The first occurrence of a key wins, any later
    occurrence is skipped like every other property we are not interested in.

    @param stream: The stream positioned just after the object type byte.
    @type stream: L{pyamf.util.BufferedByteStream}
    @param keys: The property names to collect.
    @type keys: sequence of C{bytes}
    @return: The collected values, keyed by property name. Keys that were not
        found are absent.
    @rtype: C{dict}
    @raise DecodeError: The object is malformed, unterminated or contains a
        value that cannot be skipped.
    """
    found = {}

    while True:
        # an empty key and the end marker need 3 bytes
        if stream.remaining() < 3:
            raise DecodeError('AMF0 object is not terminated')

        length = stream.read_ushort()

        if length == 0:
            marker = stream.read_uchar()

            if marker != TYPE_OBJECTTERM:
                raise DecodeError('Expected AMF0 object end (got 0x%02x)' % (
                    marker,))

            return found

        _require(stream, length)

        name = stream.read(length)

        if name in keys and name not in found:
            found[name] = decode_string(stream)
        else:
            skip_value(stream)
