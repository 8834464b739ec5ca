# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-
"""This module implements the TFTP Server functionality. Instantiate an
instance of the server with the payload to serve, and then run the listen()
method to listen for client requests. Every read request, whatever the
filename, is answered with the payload. Logging is performed via the standard
python logging module."""

import logging
import select
import socket
import threading

from rotftp.shared import DATAGRAM_SIZE,SELECT_TIMEOUT
from rotftp.config import ServerConfig
from rotftp.context import Session
from rotftp.packet import decode_read_request
from rotftp.exceptions import TftpException,TftpDecodeError,TftpTransportError

logger = logging.getLogger('rotftp.server')

class TftpServer:
    """This class implements a tftp server object. Run the listen() method to
    listen for client requests, or serve() with an already bound socket.

    Each accepted request gets its own Session running in its own thread.
    There is no limit on how many sessions run at once."""

    def __init__(self, payload: bytes, config: ServerConfig = None) -> None:
        """Initialize the server

        Args:
            payload (bytes): The data served for every request
            config (ServerConfig, optional): Listen address, retries and
                timeout. Defaults to ServerConfig().
        """

        self.payload = bytes(payload) if payload is not None else None
        self.config = config or ServerConfig()
        self.sock = None
        self.listenip = self.config.listenip
        self.listenport = self.config.listenport

        # Threads of the sessions started so far, pruned as they finish.
        self.sessions = []
        self.sessions_lock = threading.Lock()

        # A threading event to help threads synchronize with the server
        # is_running state.
        self.is_running = threading.Event()
        self.shutdown = False

    def listen(self, listenip: str = None, listenport: int = None) -> None:
        """Bind the listening socket and serve requests until stop() is
        called. The socket is closed on the way out.

        Args:
            listenip (str, optional): Listening address. Defaults to the configured one.
            listenport (int, optional): Listening port. Defaults to the configured one.

        Raises:
            TftpTransportError: Failed to bind, or the socket failed while serving
        """

        self.listenip = listenip or self.config.listenip
        self.listenport = self.config.listenport if listenport is None else listenport

        logger.info(f"Server requested on ip {self.listenip}, port {self.listenport}")
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.bind((self.listenip, self.listenport))
        except OSError as err:
            raise TftpTransportError(f"Could not bind {self.listenip}:{self.listenport}: {err}")

        try:
            self.serve(sock)
        finally:
            sock.close()

    def serve(self, sock: socket.socket) -> None:
        """Main Server loop to handle new requests

        Args:
            sock (socket.socket): a bound UDP socket

        Raises:
            TftpException: no socket or no payload
            TftpTransportError: the socket failed for a reason other than stop()
        """

        if sock is None:
            raise TftpException("No Connection")

        if self.payload is None:
            raise TftpException("payload is empty")

        self.sock = sock
        self.listenip, self.listenport = sock.getsockname()
        logger.info(f"Listening on {self.listenip}:{self.listenport} ({self.config})")

        self.is_running.set()
        try:
            while not self.shutdown:
                try:
                    readyinput, _, _ = select.select([sock], [], [], SELECT_TIMEOUT)
                    if not readyinput:
                        continue

                    buffer, (raddress, rport) = sock.recvfrom(DATAGRAM_SIZE)
                except (OSError, ValueError) as err:
                    if self.shutdown:
                        break

                    logger.error(f"Listening socket failed: {err}")
                    raise TftpTransportError(f"Receive failed: {err}")

                logger.debug(f"Read {len(buffer)} bytes from {raddress}:{rport}")
                self.dispatch(buffer, raddress, rport)

        finally:
            self.is_running.clear()

        logger.info(f"Server stopped. Session count: {self.active_sessions()}")

    def dispatch(self, buffer: bytes, raddress: str, rport: int) -> Session:
        """Start a session for a read request. Anything that isn't a valid
        read request is logged and dropped.

        Args:
            buffer (bytes): the datagram
            raddress (str): client address
            rport (int): client port

        Returns:
            Session: the started session, None if the request was dropped
        """

        try:
            rrq = decode_read_request(buffer)
        except TftpDecodeError as err:
            logger.warning(f"[{raddress}:{rport}] bad request: {err}")
            return None

        logger.info(f"[{raddress}:{rport}] file requested: {rrq.filename}")

        localip = self.listenip if self.listenip != '0.0.0.0' else None
        try:
            session = Session(raddress, rport, self.payload, self.config, localip)
        except OSError as err:
            logger.error(f"[{raddress}:{rport}] could not open session socket: {err}")
            return None

        thread = threading.Thread(target=session.run, name=f"rotftp-{raddress}:{rport}")
        try:
            thread.start()
        except RuntimeError as err:
            logger.error(f"[{raddress}:{rport}] could not start session: {err}")
            session.sock.close()
            return None

        with self.sessions_lock:
            self.sessions = [t for t in self.sessions if t.is_alive()]
            self.sessions.append(thread)

        return session

    def active_sessions(self) -> int:
        """Number of sessions still transferring."""

        with self.sessions_lock:
            self.sessions = [t for t in self.sessions if t.is_alive()]
            return len(self.sessions)

    def join_sessions(self, timeout: float = None) -> None:
        """Wait for the sessions started so far to finish."""

        with self.sessions_lock:
            sessions = list(self.sessions)

        for thread in sessions:
            thread.join(timeout)

    def stop(self) -> None:
        """Stop accepting requests. Sessions already running carry on to
        their end. The loop notices within SELECT_TIMEOUT seconds."""

        logger.debug("Stop requested")
        self.shutdown = True
