import logging
import os
import socket
import sys
import time

from typing import Union
from io import IOBase

from rotftp.shared import BLOCK_SIZE,DATAGRAM_SIZE,DEF_MODE
from rotftp.packet import types, encode_read_request, encode_ack
from rotftp.packet.codec import next_blocknumber
from rotftp.exceptions import (TftpException, TftpDecodeError, TftpPeerError,
                               TftpTimeout, TftpTransportError)
from .base import Context

logger = logging.getLogger('rotftp.context.client')

class Download(Context):
    """The download context for the client during a download.
    Note: If output is a hyphen, then the output will be sent to stdout."""

    def __init__(self, host: str, port: int, timeout: float,
                 output: Union[IOBase,str], filename: str,
                 retries: int, localip: str = None) -> None:
        """Initalize the Download context with the server and
           where to save the data

        Args:
            host (str): Server Address
            port (int): Server port
            timeout (float): Socket Timeout
            output (Union[IOBase,str]): Output data, can be one of
                - An open file object
                - A path to a file
                - '-' indicating write to STDOUT
            filename (str): The name to request
            retries (int): Timeouts in a row before giving up

        Raises:
            TftpException: unable to open the destiation file for writing
        """

        super().__init__(host, port, timeout, localip)

        self.file_to_transfer = filename
        self.retries = retries
        self.retry_count = 0
        self.next_block = 0
        # The server answers from a new port, the transfer ID.
        self.tidport = None
        self.address = socket.gethostbyname(host)
        self.filelike_fileobj = False

        # If the output object has a write() function, assume it is file-like.
        if hasattr(output, 'write'):
            self.fileobj = output
            self.filelike_fileobj = True
        # If the output filename is -, then use stdout
        elif output == '-':
            self.fileobj = sys.stdout.buffer
            self.filelike_fileobj = True
        else:
            try:
                self.fileobj = open(output, "wb")
            except OSError as err:
                raise TftpException(f"Could not open output file: {err}")

    def receive(self) -> bytes:
        """Wait for a datagram, learning the server's transfer port from the
        first reply."""

        if self.connected:
            return super().receive()

        try:
            buffer, (raddress, rport) = self.sock.recvfrom(DATAGRAM_SIZE)
        except socket.timeout:
            raise TftpTimeout("Timed-out waiting for traffic")
        except OSError as err:
            raise TftpTransportError(f"read from {self.host}:{self.port} failed: {err}")

        if raddress != self.address:
            logger.warning(f"Received traffic from {raddress}, expected host {self.host}. Discarding")
            return b""

        logger.info(f"Server answered from port {rport}")
        self.tidport = self.port = rport
        self.connect()
        return buffer

    def start(self) -> None:
        """Initiate the download.

        Raises:
            TftpTimeout: No answer from the server
            TftpPeerError: Recieved an error from the server
        """

        logger.info(f"Sending tftp download request to {self.host}")
        logger.info(f"    filename -> {self.file_to_transfer}")

        self.metrics.start_time = time.time()
        self.send(encode_read_request(self.file_to_transfer, DEF_MODE))

        try:
            while not self.cycle():
                pass
        except TftpPeerError:
            # If we received an error, then we should not save the open
            # output file or we'll be left with a partial file.
            if not self.filelike_fileobj and os.path.exists(self.fileobj.name):
                logger.debug(f"unlinking output file of {self.fileobj.name}")
                self.fileobj.close()
                os.unlink(self.fileobj.name)
            raise

    def cycle(self) -> bool:
        """Handle one datagram from the server.

        Returns:
            bool: the last block was received
        """

        try:
            buffer = self.receive()
        except TftpTimeout:
            self.retry_count += 1
            if self.retry_count >= self.retries:
                logger.debug("hit max retries, giving up")
                raise TftpTimeout("Max retries reached")

            logger.warning("resending last packet")
            self.resend_last()
            return False

        if not buffer:
            return False

        try:
            pkt = self.factory.parse(buffer)
        except TftpDecodeError as err:
            logger.warning(f"Discarding bad packet: {err}")
            return False

        if isinstance(pkt, types.Error):
            logger.error(f"Received ERR packet from server: {pkt.errmsg}")
            raise TftpPeerError(f"Received ERR packet from server: {pkt.errmsg}",
                                error_code=pkt.errorcode, errmsg=pkt.errmsg)

        if not isinstance(pkt, types.Data):
            logger.warning(f"Discarding unexpected packet: {pkt}")
            return False

        return self.handle_dat(pkt)

    def handle_dat(self, pkt: types.Data) -> bool:
        """Write a DAT packet in sequence and acknowledge it.

        Returns:
            bool: this was the last block
        """

        expected = next_blocknumber(self.next_block)
        logger.debug(f"Handling DAT packet - block {pkt.blocknumber}, expecting {expected}")

        if pkt.blocknumber == expected:
            self.retry_count = 0
            self.fileobj.write(pkt.data)
            self.metrics.bytes += len(pkt.data)
            self.metrics.blocks += 1
            self.next_block = expected
            self.send(encode_ack(pkt.blocknumber))

            # Check for end-of-file, any less than full data packet.
            if len(pkt.data) < BLOCK_SIZE:
                logger.info("End of file detected")
                return True

        elif pkt.blocknumber == self.next_block:
            logger.warning(f"Dropping duplicate block {pkt.blocknumber}, ACKing it again")
            self.metrics.add_resend(pkt.buffer)
            self.send(encode_ack(pkt.blocknumber))

        else:
            logger.warning(f"Received future block {pkt.blocknumber} but expected {expected}")

        return False

    def end(self) -> None:
        """Finish up the context."""

        super().end()
        if not self.filelike_fileobj and not self.fileobj.closed:
            self.fileobj.close()

        self.metrics.end_time = time.time()
        logger.debug(f"Set metrics.end_time to {self.metrics.end_time}")
        self.metrics.compute()
