import logging
import socket

from rotftp.shared import DATAGRAM_SIZE
from rotftp.exceptions import TftpTimeout,TftpTransportError
from rotftp.packet.factory import PacketFactory
from .metrics import Metrics

logger = logging.getLogger('rotftp.context.base')

class Context:
    """The base class of the contexts. A context owns one UDP socket used to
    talk to a single remote end."""

    def __init__(self, host: str, port: int, timeout: float, localip: str = None) -> None:
        """Constructor for the base context, setting shared instance
        variables.

        Args:
            host (str): Host address or name
            port (int): remote port
            timeout (float): timeout period for each receive
            localip (str, optional): Address to bind to. Defaults to None.
        """

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

        if localip is not None:
            self.sock.bind((localip, 0))

        self.sock.settimeout(timeout)
        self.timeout = timeout
        self.host = host
        self.port = port
        self.state = None
        self.factory = PacketFactory()
        self.metrics = Metrics()
        # The last datagram we sent, to make resending easy.
        self.last_pkt = None
        self.connected = False

    def __del__(self) -> None:
        """Simple destructor to try to call housekeeping in the end method if
        not called explicitely. Leaking file descriptors is not a good
        thing."""

        sock = getattr(self, 'sock', None)
        if sock is not None:
            sock.close()

    def __str__(self) -> str:
        return f"{self.host}:{self.port} {self.state}"

    def connect(self) -> None:
        """Tie the socket to the remote end. From here on only datagrams
        from host:port are received.

        Raises:
            TftpTransportError: the socket couldn't be connected
        """

        try:
            self.sock.connect((self.host, self.port))
        except OSError as err:
            raise TftpTransportError(f"connect to {self.host}:{self.port} failed: {err}")

        self.connected = True

    def send(self, buffer: bytes) -> None:
        """Send a datagram to the remote end and remember it for resending.

        Raises:
            TftpTransportError: the send failed
        """

        logger.debug(f"sending {len(buffer)} bytes to {self.host}:{self.port}")
        try:
            if self.connected:
                self.sock.send(buffer)
            else:
                self.sock.sendto(buffer, (self.host, self.port))
        except OSError as err:
            raise TftpTransportError(f"write to {self.host}:{self.port} failed: {err}")

        self.last_pkt = buffer

    def resend_last(self) -> None:
        """Resend the last sent datagram verbatim."""

        logger.warning(f"Resending last packet on session {self}")
        self.metrics.add_resend(self.last_pkt)
        self.send(self.last_pkt)

    def receive(self) -> bytes:
        """Wait up to the timeout for one datagram.

        Raises:
            TftpTimeout: nothing arrived in time
            TftpTransportError: the receive failed

        Returns:
            bytes: the datagram
        """

        try:
            buffer = self.sock.recv(DATAGRAM_SIZE)
        except socket.timeout:
            raise TftpTimeout("Timed-out waiting for traffic")
        except OSError as err:
            raise TftpTransportError(f"read from {self.host}:{self.port} failed: {err}")

        logger.debug(f"Received {len(buffer)} bytes from {self.host}:{self.port}")
        return buffer

    def end(self) -> None:
        """Perform session cleanup, since the end method should always be
        called explicitely by the calling code, this works better than the
        destructor."""

        logger.debug("in Context.end - closing socket")
        self.sock.close()
