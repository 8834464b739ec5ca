# vim: ts=4 sw=4 et ai:
# -*- coding: utf8 -*-
"""This module implements the TFTP Client functionality. Instantiate an
instance of the client, and then use its download method. Logging is
performed via the standard python logging module."""

import logging

from io import IOBase
from typing import Union

from rotftp.shared import DEF_TFTP_PORT,DEF_TIMEOUT,DEF_RETRIES
from rotftp.context import Download

logger = logging.getLogger('rotftp.client')

class TftpClient:
    """This class is an implementation of a read-only tftp client. Once
    instantiated, a download can be initiated via the download() method."""

    def __init__(self, host: str, port: int = None, timeout: float = None,
                 retries: int = None, localip: str = None) -> None:
        """Initialize the TFTP client class

        Args:
            host (str): The server for which you are connecting to
            port (int, optional): The server port. Defaults to 69.
            timeout (float, optional): Seconds to wait for each block. Defaults to 6.
            retries (int, optional): Timeouts in a row before giving up. Defaults to 10.
            localip (str, optional): The source ip for all requests. Defaults to None.
        """

        self.context = None
        self.host = host
        self.iport = port or DEF_TFTP_PORT
        self.timeout = timeout or DEF_TIMEOUT
        self.retries = retries or DEF_RETRIES
        self.localip = localip

    def download(self, filename: str, output: Union[IOBase,str]) -> None:
        """This method initiates a tftp download from the configured remote
        host, requesting the filename passed.

        Args:
            filename (str): The name of the file to request from the server
            output (str): Where to save the file. Can be either a file-name/path,
                            a file-like object or a '-' for stdout

        Raises:
            TftpTimeout: the server stopped answering
            TftpPeerError: the server sent an error
        """

        logger.debug("Creating download context with the following params:")
        logger.debug(f" host = {self.host}, port = {self.iport}, filename = {filename}")
        logger.debug(f" timeout = {self.timeout}, retries = {self.retries}")
        self.context = Download(self.host,
                                self.iport,
                                self.timeout,
                                output,
                                filename,
                                self.retries,
                                localip = self.localip)

        try:
            # Download happens here
            self.context.start()
        finally:
            self.context.end()

        metrics = self.context.metrics

        logger.info("Download complete.")
        if metrics.duration == 0:
            logger.info("Duration too short, rate undetermined")
        else:
            logger.info(f"Downloaded {metrics.bytes} bytes in {metrics.duration:.2f} seconds")
            logger.info(f"Average rate: {metrics.kbps:.2f} kbps")
        logger.info(f"Received {metrics.resends} duplicate packets")
