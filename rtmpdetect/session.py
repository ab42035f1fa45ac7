# -*- test-case-name: rtmpdetect.tests.test_session -*-

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
Per connection detection state and the entry point that drives it.

The host owns one L{ConnectionContext} per connection and hands it to
L{validate} together with each chunk of data it sees, in arrival order, one
direction at a time. Nothing in here keeps a reference to the context between
calls.
"""

from twisted.python import log
from pyamf.util import BufferedByteStream

from rtmpdetect import handshake
from rtmpdetect.exc import DetectionError


__all__ = [
    'ConnectionContext',
    'validate',
    'FROM_INITIATOR',
    'FROM_RESPONDER',
    'IN_PROGRESS',
    'SUCCESS',
    'FAILURE',
]


#: Data sent by the peer that opened the connection (the client)
FROM_INITIATOR = 0
#: Data sent by the peer that accepted the connection (the server)
FROM_RESPONDER = 1

#: More data is needed before a verdict can be given
IN_PROGRESS = 'in-progress'
#: Both directions completed the handshake and the connect command was read
SUCCESS = 'success'
#: This is not RTMP, or not RTMP we understand. Terminal.
FAILURE = 'failure'


class ConnectionContext(object):
    """
    Holds the detection state of a single connection.

    @ivar client: The state of the initiator direction.
    @type client: L{handshake.ClientState}
    @ivar server: The state of the responder direction.
    @type server: L{handshake.ServerState}
    @ivar swfUrl: The extracted SWF url, until it is handed over.
    @ivar pageUrl: The extracted page url, until it is handed over.
    @ivar verdict: The last verdict given for this connection.
    """

    def __init__(self):
        self.client = handshake.ClientState()
        self.server = handshake.ServerState()

        self.swfUrl = None
        self.pageUrl = None

        self.verdict = IN_PROGRESS

    def __repr__(self):
        return '<%s verdict=%s client=%r server=%r at 0x%x>' % (
            self.__class__.__name__, self.verdict, self.client, self.server,
            id(self))

    def getDirection(self, direction):
        """
        Returns the state of C{direction} and of the opposite direction.
        """
        if direction == FROM_INITIATOR:
            return self.client, self.server

        if direction == FROM_RESPONDER:
            return self.server, self.client

        raise ValueError('Unknown direction %r' % (direction,))

    def done(self):
        return self.client.done() and self.server.done()

    def transfer(self):
        """
        Hands over the extracted urls. The context forgets about them.

        @return: The SWF url and the page url, either may be C{None}.
        @rtype: C{tuple}
        """
        urls = self.swfUrl, self.pageUrl

        self.swfUrl = self.pageUrl = None

        return urls

    def release(self):
        """
        Drops anything extracted so far. Called when detection fails or the
        host reclaims the connection.
        """
        self.swfUrl = self.pageUrl = None

    def fail(self):
        self.release()
        self.verdict = FAILURE


def validate(context, direction, data, sink=None):
    """
    Feeds C{data} received in C{direction} to the detection state of a
    connection.

    @param context: The state of the connection.
    @type context: L{ConnectionContext}
    @param direction: L{FROM_INITIATOR} or L{FROM_RESPONDER}.
    @param data: The bytes received.
    @type data: C{bytes}
    @param sink: Receives the extracted urls when the verdict becomes
        L{SUCCESS}.
    @type sink: L{rtmpdetect.interfaces.IConnectSink} or C{None}
    @return: L{IN_PROGRESS}, L{SUCCESS} or L{FAILURE}.
    """
    if context.verdict != IN_PROGRESS:
        return context.verdict

    if not data:
        return IN_PROGRESS

    state, other = context.getDirection(direction)
    stream = BufferedByteStream(data)

    try:
        connect = state.dataReceived(stream, other)
    except DetectionError as e:
        log.msg('RTMP detection failed (%s): %s' % (state.label, e))

        context.fail()

        return FAILURE

    if connect is not None:
        context.swfUrl = connect.swfUrl
        context.pageUrl = connect.pageUrl

    if not context.done():
        return IN_PROGRESS

    context.verdict = SUCCESS

    swfUrl, pageUrl = context.transfer()

    if sink is not None:
        sink.connectReceived(swfUrl, pageUrl)

    return SUCCESS
