# -*- test-case-name: rtmpdetect.tests.test_parse_dump -*-

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
Runs RTMP dumps from Wireshark - converted to c array format - through the
detector.

In Wireshark use "Follow TCP Stream", select "C Arrays" and save. Blocks
labelled C{peer0} were sent by the client, C{peer1} by the server.

@since: 0.1
"""

import re
import sys

from twisted.python import log, usage
from zope.interface import implementer

from rtmpdetect import config, interfaces, service, session


__all__ = ['parse_dump', 'read_dump', 'ReportObserver']


#: e.g. C{char peer0_12[] = { /* Packet 4 */}
_ARRAY_START = re.compile(r'char\s+peer(\d+)_\d+\s*\[\]\s*=\s*\{')
_COMMENT = re.compile(r'/\*.*?\*/')


def parse_dump(f, svc, flowId='dump'):
    """
    Reads a pre-recorded RTMP stream (in c array format) from C{f} and feeds
    it to C{svc} until a verdict is reached.

    @param svc: The detector.
    @type svc: L{service.RTMPService}
    @return: The last verdict given.
    """
    verdict = session.IN_PROGRESS

    for label, data in read_dump(f):
        if label == 'send':
            direction = session.FROM_INITIATOR
        else:
            direction = session.FROM_RESPONDER

        verdict = svc.validate(flowId, direction, data)

        if verdict != session.IN_PROGRESS:
            break

    return verdict



def read_dump(f):
    """
    Takes an open file object that reads c array formatted text and returns a
    generator that will return tuples containing the label for the endpoint
    (C{'send'} for the client, C{'recv'} for the server) and the bytes sent.
    """
    to = None
    buf = ''

    for line in f:
        line = clean_line(line)

        if line == '':
            continue

        m = _ARRAY_START.search(line)

        if m is not None:
            if m.group(1) == '0':
                to = 'send'
            else:
                to = 'recv'

            buf = line[m.end():]
        elif to is None:
            continue
        else:
            buf += line

        if buf.endswith('};'):
            yield (to, parse_bytes(buf[:-2]))

            to = None
            buf = ''



def clean_line(l):
    l = _COMMENT.sub('', l)

    return l.strip()



def parse_bytes(buf):
    """
    Turns a comma separated list of C{0x..} literals into bytes.
    """
    values = [x.strip() for x in buf.split(',')]

    return bytes(bytearray(int(x, 16) for x in values if x))



@implementer(interfaces.IServiceObserver)
class ReportObserver(object):
    """
    Writes the outcome of detection to a file object.
    """

    def __init__(self, file):
        self.file = file

    def serviceDetected(self, flowId, flow):
        s = flow.httpSession

        self.file.write('%s: RTMP\n' % (flowId,))

        if s is not None:
            if s.url is not None:
                self.file.write('  swfUrl: %s\n' % (s.url,))

            if s.referer is not None:
                self.file.write('  pageUrl: %s\n' % (s.referer,))

    def serviceFailed(self, flowId, flow):
        self.file.write('%s: not RTMP (after %d packets)\n' % (
            flowId, flow.packets))



class Options(config.Options):
    """
    Options for the C{rtmpdetect-dump} script.
    """

    synopsis = 'Usage: rtmpdetect-dump [options] dumpfile'

    def parseArgs(self, filename):
        self['filename'] = filename



def run(argv=None, out=None):
    if argv is None:
        argv = sys.argv[1:]

    if out is None:
        out = sys.stdout

    options = Options()

    try:
        options.parseOptions(argv)
    except usage.UsageError as e:
        out.write('%s\n%s\n' % (e, options))

        return 1

    if options['verbose']:
        log.startLogging(out)

    svc = service.RTMPService(config.Config.fromOptions(options),
        ReportObserver(out))

    with open(options['filename'], 'r') as f:
        verdict = parse_dump(f, svc, options['filename'])

    if verdict == session.IN_PROGRESS:
        flow = svc.getFlow(options['filename'])

        out.write('%s: undecided after %d packets\n' % (
            options['filename'], flow.packets if flow else 0))

    return 0


def main():
    sys.exit(run())
