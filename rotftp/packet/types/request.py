import logging
import struct

from .base import TftpPacket
from rotftp.shared import Opcodes,DEF_MODE,tftpassert
from rotftp.exceptions import TftpDecodeError,TftpUnsupportedMode

logger = logging.getLogger('rotftp.packet.types.request')

class ReadRQ(TftpPacket):
    """
    Read Request
          2 bytes    string    1 byte    string    1 byte
          -----------------------------------------------
    RRQ  |  01   |  Filename  |   0  |    Mode    |   0  |
          -----------------------------------------------
    """

    def __init__(self) -> None:
        super().__init__()
        self.opcode = Opcodes.RRQ
        self.filename = None
        self.mode = DEF_MODE

    def __str__(self) -> str:
        return f"RRQ packet: filename = {self.filename} mode = {self.mode}"

    def encode(self) -> 'ReadRQ':
        """Encode the packet's buffer from the instance variables. An empty
        mode is sent as octet.

        Returns:
            ReadRQ: self
        """

        tftpassert(self.filename, "filename required in initial packet")

        filename = self.to_bytes(self.filename)
        mode = self.to_bytes(self.mode or DEF_MODE)

        tftpassert(b"\x00" not in filename, "filename can't contain a NUL byte")
        tftpassert(b"\x00" not in mode, "mode can't contain a NUL byte")

        logger.debug(f"Encoding RRQ packet, filename = {filename}, mode = {mode}")

        fmt = b"!H%dsx%dsx" % (len(filename), len(mode))
        self.buffer = struct.pack(fmt, self.opcode, filename, mode)

        return self

    def decode(self) -> 'ReadRQ':
        """Decode the buffer. Anything past the mode terminator (option
        pairs, padding) is ignored.

        Raises:
            TftpDecodeError: malformed request
            TftpUnsupportedMode: the mode is not octet

        Returns:
            ReadRQ: self
        """

        self.check_opcode()

        filename, offset = self.read_string(self.buffer, 2)
        if not filename:
            raise TftpDecodeError("Invalid RRQ, empty filename")

        mode, offset = self.read_string(self.buffer, offset)
        if not mode:
            raise TftpDecodeError("Invalid RRQ, empty mode")

        if mode.lower() != DEF_MODE:
            raise TftpUnsupportedMode(f"Unsupported mode: {mode}, only binary transfers supported")

        if offset < len(self.buffer):
            logger.debug(f"Ignoring {len(self.buffer) - offset} trailing bytes in RRQ")

        self.filename = filename
        self.mode = mode
        logger.debug(f"set filename to {self.filename}")
        logger.debug(f"set mode to {self.mode}")

        return self
