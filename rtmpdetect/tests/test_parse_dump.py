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
Tests for L{rtmpdetect.scripts.parse_dump}.
"""

import io

from twisted.trial import unittest

from rtmpdetect import service, session
from rtmpdetect.scripts import parse_dump
from rtmpdetect.tests import util


def to_c_array(name, data, comment=None):
    """
    Formats C{data} the way Wireshark does.
    """
    lines = []

    if comment is None:
        lines.append('char %s[] = {' % (name,))
    else:
        lines.append('char %s[] = { /* %s */' % (name, comment))

    row = []

    for i, b in enumerate(bytearray(data)):
        row.append('0x%02x' % (b,))

        if len(row) == 8:
            lines.append(', '.join(row) + (', ' if i < len(data) - 1 else ''))
            row = []

    if row:
        lines.append(', '.join(row))

    lines.append('};')

    return '\n'.join(lines) + '\n'


def build_dump(blocks):
    out = []

    for n, (peer, data) in enumerate(blocks):
        out.append(to_c_array('peer%d_%d' % (peer, n), data,
            'Packet %d' % (n + 4,)))

    return ''.join(out)


class ReadDumpTestCase(unittest.TestCase):
    """
    Tests for L{parse_dump.read_dump}
    """

    def test_blocks(self):
        f = io.StringIO(build_dump([(0, b'\x03abc'), (1, b'\x03' * 20)]))

        self.assertEqual(list(parse_dump.read_dump(f)), [
            ('send', b'\x03abc'),
            ('recv', b'\x03' * 20),
        ])

    def test_single_line(self):
        f = io.StringIO('char peer1_0[] = { 0x01, 0x02 };\n')

        self.assertEqual(list(parse_dump.read_dump(f)), [('recv', b'\x01\x02')])

    def test_noise(self):
        f = io.StringIO('/* header */\n\n0x01, 0x02\n' +
            to_c_array('peer0_0', b'\xff'))

        self.assertEqual(list(parse_dump.read_dump(f)), [('send', b'\xff')])

    def test_parse_bytes(self):
        self.assertEqual(parse_dump.parse_bytes('0x00, 0x7f,0xFF, '),
            b'\x00\x7f\xff')


class ParseDumpTestCase(unittest.TestCase):
    """
    Tests for L{parse_dump.parse_dump}
    """

    def test_detected(self):
        client = util.clientStream()
        server = util.serverStream()

        f = io.StringIO(build_dump([
            (0, client[:1537]),
            (1, server),
            (0, client[1537:]),
            (1, b'\x02' * 30),
        ]))

        svc = service.RTMPService()

        self.assertEqual(parse_dump.parse_dump(f, svc, 'x'), session.SUCCESS)

        flow = svc.getFlow('x')

        self.assertEqual(flow.packets, 3)
        self.assertEqual(flow.httpSession.url, util.SWF_URL)

    def test_not_rtmp(self):
        f = io.StringIO(build_dump([(0, b'GET / HTTP/1.1\r\n\r\n')]))

        svc = service.RTMPService()

        self.assertEqual(parse_dump.parse_dump(f, svc), session.FAILURE)


class RunTestCase(unittest.TestCase):
    """
    Tests for L{parse_dump.run}
    """

    def write(self, blocks):
        path = self.mktemp()

        with open(path, 'w') as f:
            f.write(build_dump(blocks))

        return path

    def test_detected(self):
        client = util.clientStream()
        server = util.serverStream()

        path = self.write([
            (0, client[:1537]),
            (1, server),
            (0, client[1537:]),
        ])

        out = io.StringIO()

        self.assertEqual(parse_dump.run([path], out), 0)
        self.assertEqual(out.getvalue(), '%s: RTMP\n'
            '  swfUrl: %s\n'
            '  pageUrl: %s\n' % (path, util.SWF_URL, util.PAGE_URL))

    def test_referred_disabled(self):
        client = util.clientStream()
        server = util.serverStream()

        path = self.write([
            (0, client[:1537]),
            (1, server),
            (0, client[1537:]),
        ])

        out = io.StringIO()

        self.assertEqual(parse_dump.run(['--referred-disabled', path], out), 0)
        self.assertEqual(out.getvalue(), '%s: RTMP\n'
            '  swfUrl: %s\n' % (path, util.SWF_URL))

    def test_failed(self):
        path = self.write([(1, b'\x03')])

        out = io.StringIO()

        self.assertEqual(parse_dump.run([path], out), 0)
        self.assertEqual(out.getvalue(),
            '%s: not RTMP (after 1 packets)\n' % (path,))

    def test_undecided(self):
        path = self.write([(0, b'\x03' * 10)])

        out = io.StringIO()

        self.assertEqual(parse_dump.run([path], out), 0)
        self.assertEqual(out.getvalue(),
            '%s: undecided after 1 packets\n' % (path,))

    def test_usage(self):
        out = io.StringIO()

        self.assertEqual(parse_dump.run([], out), 1)
        self.assertIn('Usage: rtmpdetect-dump', out.getvalue())
