# -*- test-case-name: rtmpdetect.tests.test_handshake -*-

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
Passive tracking of an RTMP handshake.

Each peer sends a version byte followed by two 1536 byte blocks (C0, C1, C2
from the client and S0, S1, S2 from the server). We do not look inside the
blocks, we only count bytes. What we do check is that the peers take turns
the way a real handshake does:

 - the server cannot send S0 before the client has sent C0.
 - neither peer can send its second block before it has seen the first block
   of the other peer.

Each direction is tracked by its own L{DirectionState}. Data is only ever
consumed, the handshake is observed, never negotiated.

@since: 0.1
"""

from rtmpdetect import command
from rtmpdetect.exc import ProtocolVersionError, OrderingError


__all__ = [
    'ClientState',
    'ServerState',
]


HANDSHAKE_LENGTH = 1536

#: The only protocol version we recognise, plain RTMP
RTMP = 0x03

#: The stages of a direction, in the order they are reached
INIT = 0
SENT_VERSION = 1
RECEIVING_BULK1 = 2
RECEIVED_BULK1 = 3
RECEIVING_BULK2 = 4
RECEIVED_BULK2 = 5
DONE = 6

STAGE_NAMES = {
    INIT: 'init',
    SENT_VERSION: 'sent-version',
    RECEIVING_BULK1: 'receiving-bulk1',
    RECEIVED_BULK1: 'received-bulk1',
    RECEIVING_BULK2: 'receiving-bulk2',
    RECEIVED_BULK2: 'received-bulk2',
    DONE: 'done',
}


def peerHasVersion(other):
    """
    Whether the other direction has sent its version byte.
    """
    return other.state >= SENT_VERSION


def peerHasFirstBlock(other):
    """
    Whether the other direction has sent all of its first block.
    """
    return other.state >= RECEIVED_BULK1


class DirectionState(object):
    """
    The handshake progress of one direction of a connection.

    @ivar state: The current stage, one of the module level stage constants.
    @type state: C{int}
    @ivar remaining: The number of bytes of the current block still to be
        seen. Only meaningful in one of the receiving stages.
    @type remaining: C{int}
    """

    def __init__(self):
        self.state = INIT
        self.remaining = 0

    def __repr__(self):
        return '<%s state=%s remaining=%d at 0x%x>' % (
            self.__class__.__name__, STAGE_NAMES[self.state], self.remaining,
            id(self))

    def done(self):
        return self.state == DONE

    def dataReceived(self, stream, other):
        """
        Consumes as much of C{stream} as the handshake allows.

        Stages that complete on a byte boundary fall through to the next one
        in the same call. Once L{DONE} is reached the rest of the stream is
        discarded.

        @param stream: The bytes received for this direction.
        @type stream: L{pyamf.util.BufferedByteStream}
        @param other: The state of the opposite direction.
        @type other: L{DirectionState}
        @return: The connect command if this call completed the client side,
            otherwise C{None}.
        @raise HandshakeError: The handshake is invalid.
        @raise DecodeError: The connect command is invalid.
        """
        result = None

        while self.state != DONE:
            if stream.at_eof() and not self.completesWithoutData():
                break

            ret = self._step(stream, other)

            if ret is not None:
                result = ret

        if self.state == DONE and not stream.at_eof():
            stream.read(stream.remaining())

        return result

    def _step(self, stream, other):
        state = self.state

        if state == INIT:
            if not self.mayBeginVersion(other):
                raise OrderingError('%s sent its version before the peer' % (
                    self.label,))

            v = stream.read_uchar()

            if v != RTMP:
                raise ProtocolVersionError('Unexpected protocol version '
                    '(got %d, expected %d)' % (v, RTMP))

            self.state = SENT_VERSION
        elif state == SENT_VERSION:
            self.remaining = HANDSHAKE_LENGTH
            self.state = RECEIVING_BULK1
        elif state == RECEIVED_BULK1:
            if not peerHasFirstBlock(other):
                raise OrderingError('%s sent its second block before the '
                    'first block of the peer was seen' % (self.label,))

            self.remaining = HANDSHAKE_LENGTH
            self.state = RECEIVING_BULK2
        elif state in (RECEIVING_BULK1, RECEIVING_BULK2):
            available = stream.remaining()

            if available < self.remaining:
                # we've still got more to get next time around
                self.remaining -= available
                stream.read(available)
            else:
                stream.read(self.remaining)

                self.remaining = 0
                self.state = state + 1
        elif state == RECEIVED_BULK2:
            ret = self.handshakeComplete(stream)

            self.state = DONE

            return ret

    def mayBeginVersion(self, other):
        """
        Whether this direction is allowed to send its version byte.
        """
        raise NotImplementedError

    def completesWithoutData(self):
        """
        Whether the current stage can complete with no data left to consume.
        """
        return False

    def handshakeComplete(self, stream):
        """
        Called when both blocks have been seen and there is more to consume.
        """
        raise NotImplementedError


class ClientState(DirectionState):
    """
    Tracks the data sent by the peer that initiated the connection.

    The first message following C2 must be the connect command.
    """

    label = 'client'

    def mayBeginVersion(self, other):
        return True

    def handshakeComplete(self, stream):
        return command.extract_connect(stream)


class ServerState(DirectionState):
    """
    Tracks the data sent by the peer that accepted the connection.

    We lose interest in the server as soon as S2 has been seen.
    """

    label = 'server'

    def mayBeginVersion(self, other):
        # client must initiate
        return peerHasVersion(other)

    def completesWithoutData(self):
        return self.state == RECEIVED_BULK2

    def handshakeComplete(self, stream):
        return None
