# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-

"""This module holds all objects shared by all other modules in rotftp."""

from enum import IntEnum

DATAGRAM_SIZE = 516
BLOCK_SIZE = DATAGRAM_SIZE - 4
MAX_BLOCKNUMBER = 65535
DEF_RETRIES = 10
DEF_TIMEOUT = 6
DEF_TFTP_PORT = 69
DEF_LISTENIP = '127.0.0.1'
DEF_MODE = 'octet'
ENCODING = 'utf-8'

# How often the dispatcher wakes up to check for a stop request.
SELECT_TIMEOUT = 1

def tftpassert(condition, msg):
    """This function is a simple utility that will check the condition
    passed for a false state. If it finds one, it throws an AssertionError
    with the message passed. This just makes the code throughout cleaner
    by refactoring."""
    if not condition:
        raise AssertionError(msg)

class Opcodes(IntEnum):
    """Packet kinds on the wire. WRQ is reserved and never accepted."""
    RRQ = 1
    WRQ = 2
    DATA = 3
    ACK = 4
    ERROR = 5

class TftpErrors(IntEnum):
    """This class is a convenience for defining the common tftp error codes,
    and making them more readable in the code."""
    NOTDEFINED = 0
    FILENOTFOUND = 1
    ACCESSVIOLATION = 2
    DISKFULL = 3
    ILLEGALTFTPOP = 4
    UNKNOWNTID = 5
    FILEALREADYEXISTS = 6
    NOSUCHUSER = 7
