from . import clock, codec
from .clock import Clock, FixedClock, SystemClock, from_millis, to_millis
from .codec import decode_base64url, encode_base64url, from_json, join, split, to_json

__all__ = [
    "clock",
    "codec",
    "Clock",
    "FixedClock",
    "SystemClock",
    "from_millis",
    "to_millis",
    "decode_base64url",
    "encode_base64url",
    "from_json",
    "join",
    "split",
    "to_json",
]
