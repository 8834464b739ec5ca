from . import types
from .factory import PacketFactory
from .codec import (encode_read_request, decode_read_request, encode_data,
                    decode_data, encode_ack, decode_ack, encode_error,
                    decode_error)
