"""This module implements the contexts of a transfer, the main interface to
which being the Context base class.

Each context object owns the socket for a single transfer and the state
object that drives it. The server runs one Session per download, the client
a Download."""

from .base import Context
from .session import Session
from .client import Download
