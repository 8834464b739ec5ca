import struct
import logging

from .base import TftpPacket
from rotftp.shared import Opcodes,DATAGRAM_SIZE
from rotftp.exceptions import TftpDecodeError

logger = logging.getLogger('rotftp.packet.types.data')

class Data(TftpPacket):
    """
           2 bytes  2 bytes  n bytes
           ---------------------~~--
    DATA  | 03    | Block # | Data  |
           ---------------------~~--
    """

    def __init__(self) -> None:
        super().__init__()
        self.opcode = Opcodes.DATA
        self.blocknumber = 0
        self.data = b""

    def __str__(self) -> str:
        s = f"DAT packet: block {self.blocknumber}"
        if self.data:
            s += f"\n    data: {len(self.data)} bytes"

        return s

    def encode(self) -> 'Data':
        """Encode the Data packet.

        Returns:
            Data: self
        """

        if len(self.data) == 0:
            logger.debug("Encoding an empty DAT packet")

        fmt = b"!HH%ds" % len(self.data)
        self.buffer = struct.pack(fmt,
                                  self.opcode,
                                  self.blocknumber,
                                  self.data)

        return self

    def decode(self) -> 'Data':
        """Decode Data packet.

        Raises:
            TftpDecodeError: buffer outside 4..516 bytes or wrong opcode

        Returns:
            Data: self
        """

        buflen = len(self.buffer) if self.buffer is not None else 0
        if buflen < 4 or buflen > DATAGRAM_SIZE:
            raise TftpDecodeError(f"Invalid DAT packet length {buflen}")

        self.check_opcode()

        # We know the first 2 bytes are the opcode. The second two are the
        # block number.
        (self.blocknumber,) = struct.unpack("!H", self.buffer[2:4])
        logger.debug(f"decoding DAT packet, block number {self.blocknumber}")

        # Everything else is data.
        self.data = bytes(self.buffer[4:])
        logger.debug(f"found {len(self.data)} bytes of data")

        return self
