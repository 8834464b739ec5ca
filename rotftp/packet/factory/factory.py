import logging
import struct

from typing import Union

from rotftp.shared import Opcodes
from rotftp.exceptions import TftpDecodeError
from rotftp.packet import types

logger = logging.getLogger('rotftp.packet.factory')

packet_type = Union[
    types.ReadRQ,
    types.Ack,
    types.Data,
    types.Error
]

class PacketFactory:
    """This class generates TftpPacket objects. It is responsible for parsing
    raw buffers off of the wire and returning objects representing them, via
    the parse() method."""

    _classes = {
        Opcodes.RRQ: types.ReadRQ,
        Opcodes.DATA: types.Data,
        Opcodes.ACK: types.Ack,
        Opcodes.ERROR: types.Error,
        }

    def parse(self, buffer: bytes) -> packet_type:
        """This method is used to parse an existing datagram into its
        corresponding TftpPacket object.

        Args:
            buffer (bytes): Packet Data

        Raises:
            TftpDecodeError: short buffer, unsupported opcode or a body that
                doesn't match the opcode

        Returns:
            types: packet type base on the opcode
        """

        logger.debug(f"parsing a {len(buffer)} byte packet")
        if len(buffer) < 2:
            raise TftpDecodeError("Packet too short to hold an opcode")

        (opcode,) = struct.unpack("!H", buffer[:2])
        logger.debug(f"opcode is {opcode}")
        packet = self.__create(opcode)
        packet.buffer = buffer
        return packet.decode()

    def __create(self, opcode: int) -> packet_type:
        """This method returns the appropriate class object corresponding to
        the passed opcode.

        Args:
            opcode (int): The opcode from the buffer

        Raises:
            TftpDecodeError: opcode is unknown or not supported (WRQ)

        Returns:
            types: The Appropriate packet type class
        """

        if opcode not in self._classes:
            raise TftpDecodeError(f"Unsupported opcode: {opcode}")

        return self._classes[opcode]()
