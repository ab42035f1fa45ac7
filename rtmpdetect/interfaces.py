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
Interface documentation for the collaborators of the detector.
"""

from zope.interface import Interface, Attribute


class IConnectSink(Interface):
    """
    Takes ownership of the urls extracted from the connect command.
    """

    def connectReceived(swfUrl, pageUrl):
        """
        Called once per connection when RTMP has been detected.

        @param swfUrl: The url of the SWF file, or C{None} if the command
            object did not have one.
        @param pageUrl: The url of the page embedding the SWF file, or C{None}
            if the command object did not have one.
        """



class IServiceObserver(Interface):
    """
    Observes the outcome of detection for each flow.
    """

    def serviceDetected(flowId, flow):
        """
        RTMP was detected on the flow.

        @param flowId: The identity of the flow, as given by the host.
        @param flow: The L{rtmpdetect.service.Flow} record.
        """

    def serviceFailed(flowId, flow):
        """
        The flow is not RTMP, or detection gave up.
        """



class IHttpSession(Interface):
    """
    The part of the host session record that the detected urls are stored in.
    """

    url = Attribute("The url of the content, C{None} until known.")
    referer = Attribute("The url of the referring page, C{None} until known.")
