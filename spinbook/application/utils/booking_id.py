from __future__ import annotations

import secrets
import string
import time

BOOKING_ID_PREFIX = "SB"
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits
SUFFIX_LENGTH = 4


def generate_booking_id(now_ms: int | None = None) -> str:
    """Return ``SB-<epoch ms>-<4 chars>``. Not checked against existing bookings."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{BOOKING_ID_PREFIX}-{timestamp}-{suffix}"
