import struct
import logging

from typing import Tuple

from rotftp.shared import ENCODING
from rotftp.exceptions import TftpDecodeError

logger = logging.getLogger('rotftp.packet.types.base')

class TftpPacket:
    """This class is the parent class of all tftp packet classes. It is an
    abstract class, providing an interface, and should not be instantiated
    directly."""

    def __init__(self) -> None:
        self.opcode = 0
        self.buffer = None

    def encode(self) -> None:
        """The encode method of a TftpPacket takes the instance variables
        specific to the type of packet, and packs an appropriate buffer in
        network-byte order suitable for sending over the wire.

        This is an abstract method."""
        raise NotImplementedError

    def decode(self) -> None:
        """The decode method of a TftpPacket takes a buffer off of the wire in
        network-byte order, and decodes it, populating internal properties as
        appropriate. The buffer includes the entire datagram, opcode
        included. Any structural problem raises TftpDecodeError.

        This is an abstract method."""
        raise NotImplementedError

    def check_opcode(self) -> None:
        """Make sure the buffer starts with this packet's opcode.

        Raises:
            TftpDecodeError: buffer is too short or holds another opcode
        """

        if self.buffer is None or len(self.buffer) < 2:
            raise TftpDecodeError("Packet too short to hold an opcode")

        (opcode,) = struct.unpack("!H", self.buffer[:2])
        if opcode != self.opcode:
            raise TftpDecodeError(f"Expected opcode {self.opcode}, got {opcode}")

    @staticmethod
    def to_bytes(value: str) -> bytes:
        """Convert a logical string to its wire form (no terminator)."""

        if isinstance(value, bytes):
            return value
        return value.encode(ENCODING)

    @staticmethod
    def read_string(buffer: bytes, offset: int, strict: bool = True) -> Tuple[str,int]:
        """Read a NUL terminated string out of the buffer.

        Args:
            buffer (bytes): packet data
            offset (int): where the string starts
            strict (bool): fail when the terminator is missing, otherwise
                return everything up to the end of the buffer

        Raises:
            TftpDecodeError: no terminator found and strict is set

        Returns:
            (str, int): the string without its terminator and the offset just
                past the terminator
        """

        end = buffer.find(b"\x00", offset)
        if end < 0:
            if strict:
                raise TftpDecodeError("Missing string terminator")
            logger.debug("No terminator found, using the rest of the buffer")
            end = len(buffer)

        value = buffer[offset:end].decode(ENCODING, errors='replace')
        return value, end + 1
