"""Time-ordered identifiers for parkhub rows."""

import os
import time
import uuid


def generate_uuid_v7() -> str:
    """
    Generate a UUIDv7 string.

    The leading 48 bits carry the Unix time in milliseconds, so ids created
    later sort after earlier ones and primary-key inserts stay append-mostly.
    """
    value = int(time.time() * 1000) << 80
    value |= int.from_bytes(os.urandom(10), "big")
    # version 7 in bits 76-79, RFC 4122 variant in bits 62-63
    value = (value & ~(0xF << 76)) | (0x7 << 76)
    value = (value & ~(0x3 << 62)) | (0x2 << 62)
    return str(uuid.UUID(int=value))
