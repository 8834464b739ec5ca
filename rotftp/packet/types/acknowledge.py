import logging
import struct

from .base import TftpPacket
from rotftp.shared import Opcodes
from rotftp.exceptions import TftpDecodeError

logger = logging.getLogger('rotftp.packet.types.acknowledge')

class Ack(TftpPacket):
    """
    Acknowledgement Packet
           2 bytes  2 bytes
           -----------------
    ACK   | 04    | Block # |
           -----------------
    """

    def __init__(self) -> None:
        super().__init__()
        self.opcode = Opcodes.ACK
        self.blocknumber = 0

    def __str__(self) -> str:
        return f"ACK packet: block {self.blocknumber}"

    def encode(self) -> 'Ack':
        """Encode acknowlegement packet for sending

        Returns:
            Ack: self
        """

        logger.debug(f"encoding ACK: opcode = {self.opcode}, block = {self.blocknumber}")
        self.buffer = struct.pack("!HH", self.opcode, self.blocknumber)
        return self

    def decode(self) -> 'Ack':
        """Decode an acknowlegement packet

        Raises:
            TftpDecodeError: wrong opcode or truncated block number

        Returns:
            Ack: self
        """

        self.check_opcode()

        if len(self.buffer) < 4:
            raise TftpDecodeError("Truncated ACK packet")

        if len(self.buffer) > 4:
            logger.debug("detected TFTP ACK but request is too large, will truncate")
            logger.debug(f"buffer was: {repr(self.buffer)}")
            self.buffer = self.buffer[0:4]

        (self.blocknumber,) = struct.unpack("!H", self.buffer[2:4])
        logger.debug(f"decoded ACK packet: block = {self.blocknumber}")
        return self
