# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-
"""
This library implements a read-only tftp server that hands out a single
in-memory payload, plus a matching download client. It is based on RFC 1350
and only supports octet mode read requests.
"""

from .shared import *
from .config import ServerConfig
from .server import TftpServer
from .client import TftpClient
from .exceptions import (TftpException, TftpDecodeError, TftpUnsupportedMode,
                         TftpPeerError, TftpTimeout, TftpRetriesExhausted,
                         TftpTransportError)
