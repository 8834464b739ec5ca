"""This module implements the state handling of a transfer, the main
interface to which being the TftpState base class.

The concept is simple. Each session object represents a single download, and
the state object in the session represents the current state of that
transfer. The state object has a handle() method that performs one step of
the transfer and returns the next state, until a terminal state (Completed or
Failed) is reached."""

from .base import TftpState
from .server import SendingBlock,AwaitingAck,Completed,Failed
