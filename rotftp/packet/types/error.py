import logging
import struct

from .base import TftpPacket
from rotftp.shared import Opcodes,TftpErrors,tftpassert
from rotftp.exceptions import TftpDecodeError

logger = logging.getLogger('rotftp.packet.types.error')

class Error(TftpPacket):
    """
        Error Packet

            2 bytes   2 bytes      string   1 byte
            --------------------------------------
     ERROR | 05     | ErrorCode |  ErrMsg  |   0  |
            --------------------------------------

    Error Codes

    Value     Meaning

    0         Not defined, see error message (if any).
    1         File not found.
    2         Access violation.
    3         Disk full or allocation exceeded.
    4         Illegal TFTP operation.
    5         Unknown transfer ID.
    6         File already exists.
    7         No such user.
    """

    errmsgs = {
        TftpErrors.NOTDEFINED: "Not defined",
        TftpErrors.FILENOTFOUND: "File not found",
        TftpErrors.ACCESSVIOLATION: "Access violation",
        TftpErrors.DISKFULL: "Disk full or allocation exceeded",
        TftpErrors.ILLEGALTFTPOP: "Illegal TFTP operation",
        TftpErrors.UNKNOWNTID: "Unknown transfer ID",
        TftpErrors.FILEALREADYEXISTS: "File already exists",
        TftpErrors.NOSUCHUSER: "No such user",
        }

    def __init__(self, errorcode: TftpErrors = TftpErrors.NOTDEFINED, errmsg: str = None) -> None:
        super().__init__()
        self.opcode = Opcodes.ERROR
        self.errorcode = errorcode
        self.errmsg = errmsg

    def __str__(self) -> str:
        s = f"ERR packet: errorcode = {self.errorcode}"
        s += f"\n    msg = {self.errmsg}"

        return s

    def encode(self) -> 'Error':
        """Encode the Error packet. Without an explicit message the standard
        text for the error code is sent.

        Returns:
            Error: self
        """

        errorcode = TftpErrors(self.errorcode)
        if self.errmsg is None:
            self.errmsg = self.errmsgs[errorcode]

        errmsg = self.to_bytes(self.errmsg)
        tftpassert(b"\x00" not in errmsg, "error message can't contain a NUL byte")

        fmt = b"!HH%dsx" % len(errmsg)
        logger.debug(f"encoding ERR packet with fmt {fmt}")
        self.buffer = struct.pack(fmt,
                                  self.opcode,
                                  errorcode,
                                  errmsg)

        return self

    def decode(self) -> 'Error':
        """Decode Error packet. The message runs up to the first NUL; when the
        terminator is missing whatever follows the error code is used.

        Raises:
            TftpDecodeError: wrong opcode or truncated error code

        Returns:
            Error: self
        """

        self.check_opcode()

        buflen = len(self.buffer)
        if buflen < 4:
            raise TftpDecodeError("malformed ERR packet, too short")
        logger.debug(f"Decoding ERR packet, length {buflen} bytes")

        (errorcode,) = struct.unpack("!H", self.buffer[2:4])
        try:
            self.errorcode = TftpErrors(errorcode)
        except ValueError:
            # Codes past 7 (RFC 2347 uses 8) are still an abort from the peer.
            logger.warning(f"ERR packet with unknown error code {errorcode}")
            self.errorcode = errorcode

        self.errmsg, _ = self.read_string(self.buffer, 4, strict=False)

        return self
