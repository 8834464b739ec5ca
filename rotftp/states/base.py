import logging

logger = logging.getLogger('rotftp.states.base')

class TftpState:
    """The base class for the states."""

    # Terminal states end the transfer; handle() is never called on them.
    terminal = False

    def __init__(self, context: 'rotftp.context.Session') -> None:
        """Constructor for setting up common instance variables."""

        self.context = context

    def __str__(self) -> str:
        return self.__class__.__name__

    def handle(self) -> 'TftpState':
        """An abstract method for advancing the transfer. It is expected to
        return a TftpState object, either itself or a new state."""

        raise NotImplementedError
