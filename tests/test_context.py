import socket
import struct
import unittest

from rotftp import context
from rotftp import states
from rotftp.config import ServerConfig
from rotftp.packet import codec
from rotftp.shared import TftpErrors
from rotftp.exceptions import TftpRetriesExhausted,TftpPeerError,TftpTransportError

class FailingReader:
    def read(self, *args, **kwargs):
        raise OSError("disk on fire")

class TestSession(unittest.TestCase):
    """Drive a server session against a plain UDP socket standing in for the
    client."""

    def setUp(self):
        self.peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.peer.bind(('127.0.0.1', 0))
        self.peer.settimeout(2)
        self.peerport = self.peer.getsockname()[1]

    def tearDown(self):
        self.peer.close()

    def make_session(self, payload, retries=3, timeout=2):
        config = ServerConfig(retries=retries, timeout=timeout)
        session = context.Session('127.0.0.1', self.peerport, payload, config)
        session.start()
        return session

    def peer_receive(self):
        buffer, address = self.peer.recvfrom(1024)
        return buffer, address

    def drain_peer(self):
        received = []
        self.peer.settimeout(0.5)
        try:
            while True:
                received.append(self.peer.recv(1024))
        except socket.timeout:
            pass
        return received

    def test_session_initial_state(self):
        session = self.make_session(b"x" * 10)
        self.assertIsInstance(session.state, states.SendingBlock)
        self.assertEqual(session.next_block, 0)
        session.end()

    def test_session_peer_never_answers(self):
        session = self.make_session(b"x" * 1000, retries=3, timeout=0.05)
        finalstate = session.run()

        self.assertIsInstance(finalstate, states.Failed)
        self.assertIsInstance(finalstate.error, TftpRetriesExhausted)

        received = self.drain_peer()
        self.assertEqual(len(received), 3)
        for buffer in received:
            self.assertEqual(buffer, received[0])
        pkt = codec.decode_data(received[0])
        self.assertEqual(pkt.blocknumber, 1)
        self.assertEqual(pkt.data, b"x" * 512)
        self.assertEqual(session.metrics.resends, 2)

    def test_session_ack_advances(self):
        session = self.make_session(b"a" * 512 + b"b" * 100, retries=3)

        session.cycle()
        self.assertIsInstance(session.state, states.AwaitingAck)
        self.assertEqual(session.retries_left, 2)
        buffer, address = self.peer_receive()
        self.assertEqual(codec.decode_data(buffer).blocknumber, 1)

        self.peer.sendto(codec.encode_ack(1), address)
        session.cycle()
        self.assertIsInstance(session.state, states.SendingBlock)

        session.cycle()
        self.assertIsInstance(session.state, states.AwaitingAck)
        self.assertEqual(session.retries_left, 2, "retry budget is reset per block")
        buffer, address = self.peer_receive()
        pkt = codec.decode_data(buffer)
        self.assertEqual(pkt.blocknumber, 2)
        self.assertEqual(pkt.data, b"b" * 100)

        self.peer.sendto(codec.encode_ack(2), address)
        session.cycle()
        self.assertIsInstance(session.state, states.Completed)
        session.end()
        self.assertEqual(session.metrics.bytes, 612)
        self.assertEqual(session.metrics.blocks, 2)

    def test_session_exact_multiple_ends_with_empty_block(self):
        session = self.make_session(b"c" * 1024, retries=3)
        sizes = []

        while not session.state.terminal:
            session.cycle()
            if isinstance(session.state, states.AwaitingAck):
                buffer, address = self.peer_receive()
                pkt = codec.decode_data(buffer)
                sizes.append(len(pkt.data))
                self.peer.sendto(codec.encode_ack(pkt.blocknumber), address)

        self.assertIsInstance(session.state, states.Completed)
        self.assertEqual(sizes, [512, 512, 0])
        session.end()

    def test_session_mismatched_ack_costs_a_retry(self):
        session = self.make_session(b"d" * 700, retries=3)
        session.cycle()
        first, address = self.peer_receive()

        self.peer.sendto(codec.encode_ack(5), address)
        session.cycle()
        self.assertIsInstance(session.state, states.AwaitingAck)
        self.assertEqual(session.retries_left, 1)

        resent, _ = self.peer_receive()
        self.assertEqual(resent, first)

        self.peer.sendto(codec.encode_ack(0), address)
        session.cycle()
        self.assertIsInstance(session.state, states.AwaitingAck)
        self.assertEqual(session.retries_left, 0)

        self.peer.sendto(codec.encode_ack(2), address)
        session.cycle()
        self.assertIsInstance(session.state, states.Failed)
        self.assertIsInstance(session.state.error, TftpRetriesExhausted)
        session.end()

    def test_session_garbage_costs_a_retry(self):
        session = self.make_session(b"e" * 10, retries=3)
        session.cycle()
        first, address = self.peer_receive()

        self.peer.sendto(b"\x00\x63garbage", address)
        session.cycle()
        self.assertIsInstance(session.state, states.AwaitingAck)
        self.assertEqual(session.retries_left, 1)
        resent, _ = self.peer_receive()
        self.assertEqual(resent, first)

        self.peer.sendto(codec.encode_ack(1), address)
        session.cycle()
        self.assertIsInstance(session.state, states.Completed)
        session.end()

    def test_session_error_packet_fails_immediately(self):
        session = self.make_session(b"f" * 2000, retries=10)
        session.cycle()
        _, address = self.peer_receive()

        self.peer.sendto(codec.encode_error(TftpErrors.DISKFULL, "full up"), address)
        session.cycle()

        self.assertIsInstance(session.state, states.Failed)
        self.assertIsInstance(session.state.error, TftpPeerError)
        self.assertEqual(session.state.error.error_code, TftpErrors.DISKFULL)
        self.assertEqual(session.state.error.errmsg, "full up")
        self.assertEqual(session.retries_left, 9)
        session.end()

    def test_session_ignores_other_senders(self):
        session = self.make_session(b"g" * 10, retries=2, timeout=0.2)
        session.cycle()
        first, address = self.peer_receive()

        stranger = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            stranger.sendto(codec.encode_ack(1), address)
            session.cycle()
        finally:
            stranger.close()

        # The stranger's ACK never reached the session, so it timed out and
        # resent the block.
        self.assertIsInstance(session.state, states.AwaitingAck)
        resent, _ = self.peer_receive()
        self.assertEqual(resent, first)
        session.end()

    def test_session_block_numbers_roll_over(self):
        session = self.make_session(b"h" * 600, retries=3)
        session.next_block = 65535
        session.cycle()
        buffer, address = self.peer_receive()
        (block,) = struct.unpack("!H", buffer[2:4])
        self.assertEqual(block, 0)

        self.peer.sendto(codec.encode_ack(0), address)
        session.cycle()
        self.assertIsInstance(session.state, states.SendingBlock)
        session.end()

    def test_session_unknown_error_code_fails(self):
        session = self.make_session(b"i" * 2000, retries=5)
        session.cycle()
        _, address = self.peer_receive()

        self.peer.sendto(struct.pack("!HH", 5, 8) + b"option refused\x00", address)
        session.cycle()

        self.assertIsInstance(session.state, states.Failed)
        self.assertIsInstance(session.state.error, TftpPeerError)
        self.assertEqual(session.state.error.error_code, 8)
        self.assertEqual(session.state.error.errmsg, "option refused")
        session.end()

    def test_session_payload_read_error(self):
        session = self.make_session(b"j" * 10)
        session.fileobj = FailingReader()
        session.cycle()

        self.assertIsInstance(session.state, states.Failed)
        self.assertIn("Payload read failed", str(session.state.error))
        self.assertEqual(self.drain_peer(), [])
        session.end()

    def test_session_send_failure(self):
        session = self.make_session(b"k" * 10)
        session.sock.close()
        session.cycle()

        self.assertIsInstance(session.state, states.Failed)
        self.assertIsInstance(session.state.error, TftpTransportError)
        session.end()
