from .base import TftpPacket
from .request import ReadRQ
from .data import Data
from .acknowledge import Ack
from .error import Error
