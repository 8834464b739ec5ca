# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-
"""Function interface over the packet classes. Each packet kind has one
encode and one decode function; encoders return the wire bytes and decoders
return the decoded packet (or block number for an ACK), raising
TftpDecodeError for anything malformed."""

import logging

from typing import BinaryIO,Tuple

from rotftp.shared import BLOCK_SIZE,MAX_BLOCKNUMBER,DEF_MODE,TftpErrors
from . import types

logger = logging.getLogger('rotftp.packet.codec')

def next_blocknumber(blocknumber: int) -> int:
    """Block numbers are 16 bits wide and roll over to 0."""

    if blocknumber >= MAX_BLOCKNUMBER:
        logger.debug("Block number rollover to 0 again")
        return 0
    return blocknumber + 1

def encode_read_request(filename: str, mode: str = DEF_MODE) -> bytes:
    pkt = types.ReadRQ()
    pkt.filename = filename
    pkt.mode = mode or DEF_MODE
    return pkt.encode().buffer

def decode_read_request(buffer: bytes) -> types.ReadRQ:
    pkt = types.ReadRQ()
    pkt.buffer = buffer
    return pkt.decode()

def encode_data(blocknumber: int, reader: BinaryIO) -> Tuple[bytes,int]:
    """Build the DAT packet that follows blocknumber.

    The block number is incremented first, then up to BLOCK_SIZE bytes are
    read from the reader. Once the reader is exhausted the packet is empty,
    which is how the end of a transfer whose size is a multiple of
    BLOCK_SIZE gets signalled.

    Args:
        blocknumber (int): the block number last sent (0 before the first)
        reader (BinaryIO): payload source, read sequentially

    Raises:
        OSError: the reader failed

    Returns:
        (bytes, int): the encoded packet and its block number
    """

    pkt = types.Data()
    pkt.blocknumber = next_blocknumber(blocknumber)
    pkt.data = reader.read(BLOCK_SIZE) or b""
    logger.debug(f"Read {len(pkt.data)} bytes for block {pkt.blocknumber}")

    return pkt.encode().buffer, pkt.blocknumber

def decode_data(buffer: bytes) -> types.Data:
    pkt = types.Data()
    pkt.buffer = buffer
    return pkt.decode()

def encode_ack(blocknumber: int) -> bytes:
    pkt = types.Ack()
    pkt.blocknumber = blocknumber
    return pkt.encode().buffer

def decode_ack(buffer: bytes) -> int:
    pkt = types.Ack()
    pkt.buffer = buffer
    return pkt.decode().blocknumber

def encode_error(errorcode: TftpErrors, errmsg: str = None) -> bytes:
    return types.Error(errorcode, errmsg).encode().buffer

def decode_error(buffer: bytes) -> types.Error:
    pkt = types.Error()
    pkt.buffer = buffer
    return pkt.decode()
