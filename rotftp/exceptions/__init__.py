from .exceptions import (TftpException, TftpDecodeError, TftpUnsupportedMode,
                         TftpPeerError, TftpTimeout, TftpRetriesExhausted,
                         TftpTransportError)
