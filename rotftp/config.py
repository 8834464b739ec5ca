# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-
"""Server configuration. Defaults are applied once, when the configuration is
built, and the values can't be changed afterwards."""

import logging

from rotftp.shared import DEF_LISTENIP,DEF_TFTP_PORT,DEF_RETRIES,DEF_TIMEOUT
from rotftp.exceptions import TftpException

logger = logging.getLogger('rotftp.config')

class ServerConfig:
    """The resolved settings a server and its sessions run with."""

    def __init__(self, listenip: str = None, listenport: int = None,
                 retries: int = None, timeout: float = None) -> None:
        """Resolve the configuration

        Args:
            listenip (str, optional): Listening address. Defaults to 127.0.0.1.
            listenport (int, optional): Listening port. Defaults to 69.
            retries (int, optional): Transmissions per block before giving up. Defaults to 10.
            timeout (float, optional): Seconds to wait for each ACK. Defaults to 6.

        Raises:
            TftpException: a value is out of range
        """

        self.__listenip = listenip or DEF_LISTENIP
        self.__listenport = DEF_TFTP_PORT if listenport is None else int(listenport)
        self.__retries = retries or DEF_RETRIES
        self.__timeout = timeout or DEF_TIMEOUT

        if not 0 <= self.__listenport <= 65535:
            raise TftpException(f"Invalid listen port: {self.__listenport}")
        if int(self.__retries) < 1:
            raise TftpException(f"retries must be at least 1, got {self.__retries}")
        if self.__timeout <= 0:
            raise TftpException(f"timeout must be positive, got {self.__timeout}")

        self.__retries = int(self.__retries)
        logger.debug(f"Resolved configuration: {self}")

    @property
    def listenip(self) -> str:
        return self.__listenip

    @property
    def listenport(self) -> int:
        return self.__listenport

    @property
    def retries(self) -> int:
        return self.__retries

    @property
    def timeout(self) -> float:
        return self.__timeout

    def __str__(self) -> str:
        return (f"{self.listenip}:{self.listenport} retries={self.retries} "
                f"timeout={self.timeout}")
