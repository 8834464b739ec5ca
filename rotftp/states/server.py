import logging

from rotftp.shared import BLOCK_SIZE
from rotftp.exceptions import (TftpException, TftpDecodeError, TftpPeerError,
                               TftpTimeout, TftpRetriesExhausted,
                               TftpTransportError)
from rotftp.packet import types, encode_data
from .base import TftpState

logger = logging.getLogger('rotftp.states.server')

class SendingBlock(TftpState):
    """The previous block was acknowledged (or nothing was sent yet). Read
    the next block from the payload and send it."""

    def handle(self) -> TftpState:
        """Encode and transmit the next DAT packet.

        Returns:
            TftpState: AwaitingAck, or Failed if the payload read or the send
                failed
        """

        context = self.context

        try:
            buffer, blocknumber = encode_data(context.next_block, context.fileobj)
        except OSError as err:
            logger.error(f"[{context.host}:{context.port}] failed to create packet: {err}")
            return Failed(context, TftpException(f"Payload read failed: {err}"))

        context.next_block = blocknumber
        context.pending_complete = len(buffer) - 4 < BLOCK_SIZE
        context.retries_left = context.config.retries

        try:
            context.send(buffer)
        except TftpTransportError as err:
            logger.error(f"[{context.host}:{context.port}] {err}")
            return Failed(context, err)

        context.retries_left -= 1
        context.metrics.blocks += 1
        context.metrics.bytes += len(buffer) - 4
        logger.debug(f"[{context.host}:{context.port}] sent block {blocknumber}, "
                     f"{len(buffer) - 4} bytes")

        return AwaitingAck(context)


class AwaitingAck(TftpState):
    """This class represents the state of the transfer when a DAT was just
    sent, and we are waiting for the matching ACK from the client."""

    def handle(self) -> TftpState:
        """Wait for one datagram from the client and act on it.

        Returns:
            TftpState: the next state
        """

        context = self.context

        try:
            buffer = context.receive()
        except TftpTimeout:
            logger.debug(f"[{context.host}:{context.port}] timed out waiting for "
                         f"ACK of block {context.next_block}")
            return self.retry()
        except TftpTransportError as err:
            logger.error(f"[{context.host}:{context.port}] waiting for acknowledgement: {err}")
            return Failed(context, err)

        try:
            pkt = context.factory.parse(buffer)
        except TftpDecodeError as err:
            logger.warning(f"[{context.host}:{context.port}] bad packet: {err}")
            return self.retry()

        if isinstance(pkt, types.Ack):
            logger.debug(f"Received ACK for block {pkt.blocknumber}")

            if pkt.blocknumber == context.next_block:
                if context.pending_complete:
                    logger.debug("Received ACK to final DAT, we're done.")
                    return Completed(context)

                return SendingBlock(context)

            logger.warning(f"[{context.host}:{context.port}] ignoring ACK for block "
                           f"{pkt.blocknumber}, expected {context.next_block}")
            return self.retry()

        elif isinstance(pkt, types.Error):
            logger.error(f"[{context.host}:{context.port}] error received: "
                         f"code {int(pkt.errorcode)} {pkt.errmsg}")
            return Failed(context, TftpPeerError(f"Received ERR packet from peer: {pkt.errmsg}",
                                                 error_code=pkt.errorcode,
                                                 errmsg=pkt.errmsg))

        logger.warning(f"[{context.host}:{context.port}] discarding unexpected packet: {pkt}")
        return self.retry()

    def retry(self) -> TftpState:
        """Spend one retry unit resending the last DAT, or give up when the
        budget is used up."""

        context = self.context

        if context.retries_left <= 0:
            logger.error(f"[{context.host}:{context.port}] too many retries on block "
                         f"{context.next_block}")
            return Failed(context, TftpRetriesExhausted(
                f"No ACK for block {context.next_block} after {context.config.retries} attempts"))

        try:
            context.resend_last()
        except TftpTransportError as err:
            logger.error(f"[{context.host}:{context.port}] {err}")
            return Failed(context, err)

        context.retries_left -= 1
        return self


class Completed(TftpState):
    """The final block was acknowledged."""

    terminal = True


class Failed(TftpState):
    """The transfer was abandoned. error holds the reason."""

    terminal = True

    def __init__(self, context: 'rotftp.context.Session', error: TftpException) -> None:
        super().__init__(context)
        self.error = error

    def __str__(self) -> str:
        return f"Failed: {self.error}"
