# -*- test-case-name: rtmpdetect.tests.test_service -*-

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
The RTMP detector as a service of a passive traffic inspector.

L{RTMPService} keeps a L{Flow} record per connection, attaches a
L{session.ConnectionContext} to it and applies the policies that do not
belong to the protocol: the packet budget, where the extracted urls end up
and the statistics.
"""

from twisted.python import log
from zope.interface import implementer

from rtmpdetect import interfaces, session
from rtmpdetect.config import Config


__all__ = [
    'RTMPService',
    'Flow',
    'HttpSession',
]


#: The default RTMP port is a registered port at U{IANA<http://iana.org>}
RTMP_PORT = 1935

#: The application id recorded on flows where RTMP was detected
APP_ID_RTMP = 'rtmp'


@implementer(interfaces.IHttpSession)
class HttpSession(object):
    """
    The urls recorded against a flow.
    """

    def __init__(self):
        self.url = None
        self.referer = None



class Stats(object):
    """
    Counters for the service.

    @ivar rtmpFlows: The number of flows RTMP was detected on.
    """

    def __init__(self):
        self.rtmpFlows = 0



@implementer(interfaces.IConnectSink)
class Flow(object):
    """
    Everything the service knows about one connection.

    @ivar flowId: The identity of the flow, as given by the host.
    @ivar context: The detection state, C{None} until the first byte is seen
        and again once detection has failed.
    @type context: L{session.ConnectionContext}
    @ivar packets: The number of deliveries seen for this flow.
    @ivar httpSession: Where the extracted urls are stored. Created when there
        is something to store.
    @type httpSession: L{HttpSession}
    @ivar serviceId: L{APP_ID_RTMP} once detected.
    @ivar failed: Whether detection failed on this flow.
    """

    def __init__(self, flowId, config):
        self.flowId = flowId
        self.config = config

        self.context = None
        self.packets = 0
        self.httpSession = None
        self.serviceId = None
        self.failed = False

    def __repr__(self):
        return '<%s flowId=%r packets=%d serviceId=%r failed=%r at 0x%x>' % (
            self.__class__.__name__, self.flowId, self.packets,
            self.serviceId, self.failed, id(self))

    def getHttpSession(self):
        if self.httpSession is None:
            self.httpSession = HttpSession()

        return self.httpSession

    def connectReceived(self, swfUrl, pageUrl):
        """
        Stores the urls from the connect command. Values already recorded for
        the flow are not replaced.
        """
        if swfUrl is not None:
            s = self.getHttpSession()

            if s.url is None:
                s.url = swfUrl

        if pageUrl is not None:
            s = self.getHttpSession()

            if not self.config.referredDisabled and s.referer is None:
                s.referer = pageUrl

    def release(self):
        if self.context is not None:
            self.context.release()

        self.context = None



class RTMPService(object):
    """
    Validates flows as RTMP.

    @ivar config: The detector settings.
    @type config: L{Config}
    @ivar observer: Told about every flow that gets a final verdict.
    @type observer: L{interfaces.IServiceObserver} or C{None}
    @ivar flows: The L{Flow} records, keyed by flow id.
    @ivar stats: The service counters.
    """

    name = 'rtmp'

    #: (port, transport) pairs the service validates
    ports = [
        (RTMP_PORT, 'tcp'),
        (RTMP_PORT, 'udp'),
    ]

    def __init__(self, config=None, observer=None):
        if config is None:
            config = Config()

        self.config = config
        self.observer = observer

        self.flows = {}
        self.stats = Stats()

    def getFlow(self, flowId):
        """
        Returns the record of C{flowId}, or C{None} if there is none.
        """
        return self.flows.get(flowId, None)

    def validate(self, flowId, direction, data):
        """
        Called by the host for every packet of a flow.

        @param flowId: The identity of the flow. Must be hashable.
        @param direction: L{session.FROM_INITIATOR} or
            L{session.FROM_RESPONDER}.
        @param data: The payload of the packet.
        @type data: C{bytes}
        @return: L{session.IN_PROGRESS}, L{session.SUCCESS} or
            L{session.FAILURE}.
        """
        flow = self.flows.get(flowId, None)

        if flow is None:
            flow = self.flows[flowId] = Flow(flowId, self.config)

        if flow.failed:
            return session.FAILURE

        flow.packets += 1

        if not data:
            return session.IN_PROGRESS

        if flow.context is None:
            flow.context = session.ConnectionContext()

        verdict = session.validate(flow.context, direction, data, flow)

        if verdict == session.IN_PROGRESS:
            if flow.packets >= self.config.maxPackets:
                log.msg('Giving up on RTMP detection for %r after %d '
                    'packets' % (flowId, flow.packets))

                verdict = session.FAILURE

        if verdict == session.FAILURE:
            self._flowFailed(flow)
        elif verdict == session.SUCCESS and flow.serviceId is None:
            self._flowDetected(flow)

        return verdict

    def reclaim(self, flowId):
        """
        Forgets about C{flowId}. Called by the host when the flow is gone.
        """
        flow = self.flows.pop(flowId, None)

        if flow is not None:
            flow.release()

    def _flowDetected(self, flow):
        flow.serviceId = APP_ID_RTMP
        self.stats.rtmpFlows += 1

        s = flow.httpSession

        log.msg('RTMP detected on %r (url=%r, referer=%r)' % (
            flow.flowId, getattr(s, 'url', None), getattr(s, 'referer', None)))

        if self.observer is not None:
            self.observer.serviceDetected(flow.flowId, flow)

    def _flowFailed(self, flow):
        flow.release()
        flow.failed = True

        if self.observer is not None:
            self.observer.serviceFailed(flow.flowId, flow)
