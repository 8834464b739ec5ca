from rotftp.shared import TftpErrors

class TftpException(Exception):
    """This class is the parent class of all exceptions regarding the handling
    of the TFTP protocol."""

    error_code = None

    def __init__(self,message,*args,error_code=None,**kwargs):
        if isinstance(error_code, int):
            self.error_code = error_code

        super().__init__(message, *args, **kwargs)

class TftpDecodeError(TftpException):
    """A datagram that does not match the layout of the packet it claims to
    be: wrong opcode, truncated header or a missing string terminator."""
    error_code = TftpErrors.ILLEGALTFTPOP

class TftpUnsupportedMode(TftpDecodeError):
    """A read request asked for a transfer mode other than octet."""
    pass

class TftpPeerError(TftpException):
    """The remote end sent an ERROR packet during a transfer."""

    def __init__(self, message, *args, error_code=None, errmsg='', **kwargs):
        self.errmsg = errmsg
        super().__init__(message, *args, error_code=error_code, **kwargs)

class TftpTimeout(TftpException):
    """This class represents a timeout error waiting for a response from the
    other end."""
    pass

class TftpRetriesExhausted(TftpException):
    """The retry budget for a block reached zero."""
    pass

class TftpTransportError(TftpException):
    """A send or receive failed for a reason other than a timeout."""
    pass
