import io
import logging
import time

from rotftp.config import ServerConfig
from rotftp.states import SendingBlock,Failed
from rotftp.exceptions import TftpTransportError
from .base import Context

logger = logging.getLogger('rotftp.context.session')

class Session(Context):
    """The server side of one download. Each session talks to its client over
    its own socket and keeps its own position in the payload; the payload
    itself is shared, read-only, with every other session."""

    def __init__(self, host: str, port: int, payload: bytes,
                 config: ServerConfig, localip: str = None) -> None:
        """Prepare the session to send the payload to a client

        Args:
            host (str): The requesting clients IP
            port (int): The requesting clients Port
            payload (bytes): The data being served
            config (ServerConfig): retry budget and timeout
            localip (str, optional): Address to send from. Defaults to None.
        """

        super().__init__(host, port, config.timeout, localip)

        self.config = config
        self.fileobj = io.BytesIO(payload)
        # The block number of the last DAT sent, 0 before the first one.
        self.next_block = 0
        # Set when the last DAT sent carried less than a full block.
        self.pending_complete = False
        self.retries_left = config.retries
        self.state = SendingBlock(self)

    def start(self) -> None:
        """Connect to the client and start the clock."""

        logger.debug("In rotftp.context.session.start")
        self.metrics.start_time = time.time()

        try:
            self.connect()
        except TftpTransportError as err:
            logger.error(f"[{self.host}:{self.port}] {err}")
            self.state = Failed(self, err)

    def cycle(self) -> None:
        """Advance the transfer by one step."""

        logger.debug(f"State is {self.state}")
        self.state = self.state.handle()

    def run(self) -> 'rotftp.states.TftpState':
        """Drive the transfer until it completes or fails. Nothing is raised,
        the outcome is the terminal state returned.

        Returns:
            TftpState: Completed or Failed
        """

        self.start()

        while not self.state.terminal:
            self.cycle()

        self.end()
        return self.state

    def end(self) -> None:
        """Finish up the session."""

        super().end()

        self.metrics.end_time = time.time()
        logger.debug(f"Set metrics.end_time to {self.metrics.end_time}")
        self.metrics.compute()

        metrics = self.metrics
        if isinstance(self.state, Failed):
            logger.warning(f"[{self.host}:{self.port}] transfer failed after "
                           f"{metrics.blocks} blocks: {self.state.error}")
            return

        logger.info(f"[{self.host}:{self.port}] sent {metrics.blocks} blocks")
        if metrics.duration == 0:
            logger.info("Duration too short, rate undetermined")
        else:
            logger.info(f"Transferred {metrics.bytes} bytes in {metrics.duration:.2f} seconds")
            logger.info(f"Average rate: {metrics.kbps:.2f} kbps")
        logger.info(f"{metrics.resent_bytes} bytes in resent data")
