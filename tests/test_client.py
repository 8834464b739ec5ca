import io
import os
import socket
import threading
import unittest

from tempfile import TemporaryDirectory

import rotftp
from rotftp.packet import codec
from rotftp.shared import TftpErrors
from rotftp.exceptions import TftpPeerError,TftpTimeout

class TestTftpClient(unittest.TestCase):
    """Run the client against a hand driven UDP socket."""

    def setUp(self):
        self.server = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.server.bind(('127.0.0.1', 0))
        self.server.settimeout(5)
        self.port = self.server.getsockname()[1]

    def tearDown(self):
        self.server.close()

    def run_client(self, output, **kwargs):
        errors = []
        client = rotftp.TftpClient('127.0.0.1', self.port, **kwargs)

        def target():
            try:
                client.download('file', output)
            except rotftp.TftpException as err:
                errors.append(err)

        thread = threading.Thread(target=target)
        thread.start()
        return thread, errors

    def test_client_download_with_duplicate(self):
        output = io.BytesIO()
        thread, errors = self.run_client(output, timeout=2, retries=3)

        request, address = self.server.recvfrom(1024)
        rrq = codec.decode_read_request(request)
        self.assertEqual(rrq.filename, 'file')
        self.assertEqual(rrq.mode, 'octet')

        # Answer from a separate socket, the way a real server does.
        tid = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        tid.bind(('127.0.0.1', 0))
        tid.settimeout(5)
        try:
            reader = io.BytesIO(b"q" * 600)
            block1, _ = codec.encode_data(0, reader)
            tid.sendto(block1, address)
            self.assertEqual(codec.decode_ack(tid.recv(1024)), 1)

            # Pretend the ACK got lost.
            tid.sendto(block1, address)
            self.assertEqual(codec.decode_ack(tid.recv(1024)), 1)

            block2, _ = codec.encode_data(1, reader)
            tid.sendto(block2, address)
            self.assertEqual(codec.decode_ack(tid.recv(1024)), 2)
        finally:
            tid.close()

        thread.join(5)
        self.assertEqual(errors, [])
        self.assertEqual(output.getvalue(), b"q" * 600)

    def test_client_peer_error(self):
        root = TemporaryDirectory()
        self.addCleanup(root.cleanup)
        path = os.path.join(root.name, 'out')

        thread, errors = self.run_client(path, timeout=2, retries=3)
        _, address = self.server.recvfrom(1024)
        self.server.sendto(codec.encode_error(TftpErrors.FILENOTFOUND), address)
        thread.join(5)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], TftpPeerError)
        self.assertEqual(errors[0].error_code, TftpErrors.FILENOTFOUND)
        self.assertFalse(os.path.exists(path), "partial output removed")

    def test_client_gives_up(self):
        thread, errors = self.run_client(io.BytesIO(), timeout=0.05, retries=2)
        thread.join(5)

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], TftpTimeout)
