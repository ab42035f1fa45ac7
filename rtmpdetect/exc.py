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
Exception types raised while detecting RTMP.

Every failure is terminal for the detection attempt of a connection. The
hierarchy exists so that tests and logs can tell what went wrong, the session
treats them all the same.
"""

__all__ = [
    'DetectionError',
    'HandshakeError',
    'ProtocolVersionError',
    'OrderingError',
    'DecodeError',
    'CommandError',
]



class DetectionError(Exception):
    """
    Base exception class from which all others must be subclassed.
    """



class HandshakeError(DetectionError):
    """
    Generic class for handshaking related errors.
    """



class ProtocolVersionError(HandshakeError):
    """
    Raised if a peer announces a protocol version other than plain RTMP.
    """



class OrderingError(HandshakeError):
    """
    Raised when one peer advances past a handshake stage that the other peer
    has not reached yet.
    """



class DecodeError(DetectionError):
    """
    Raised if there is an error decoding an RTMP chunk or an AMF0 value.
    """



class CommandError(DecodeError):
    """
    Raised when the first message after the handshake is well formed but is
    not an AMF0 C{connect} command.
    """
