import logging

logger = logging.getLogger('rotftp.context.metrics.base')

class Metrics:
    """A class representing metrics of the transfer."""

    def __init__(self) -> None:
        # Payload bytes transferred
        self.bytes = 0
        # Bytes re-sent
        self.resent_bytes = 0
        # Blocks transferred and resends
        self.blocks = 0
        self.resends = 0
        # Times
        self.start_time = 0
        self.end_time = 0
        self.duration = 0
        # Rates
        self.bps = 0
        self.kbps = 0

    def compute(self) -> None:
        """Compute transfer time

           Sets:
               duration: Time taken for the transfer
               bps: Speed in bits per seconds
               kbps: Speed in kbps
        """

        self.duration = self.end_time - self.start_time

        logger.debug(f"Metrics.compute: duration is {self.duration}")
        if self.duration <= 0:
            self.bps = self.kbps = 0
            return

        self.bps = (self.bytes * 8.0) / self.duration
        self.kbps = self.bps / 1024.0
        logger.debug(f"Metrics.compute: kbps is {self.kbps}")

    def add_resend(self, buffer: bytes) -> None:
        """Record a datagram that had to be sent again."""

        self.resends += 1
        self.resent_bytes += len(buffer)
