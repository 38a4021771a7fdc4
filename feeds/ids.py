"""
Article identifier strategies.

``ephemeral_id`` is for display-only items and is unique per call.
``share_id`` is a stable hash of the headline, so the same story always
maps to the same link without a central ID issuer.
"""
import random
import string
from datetime import datetime, timezone
from typing import Optional

BASE36 = string.digits + string.ascii_lowercase
SHARE_ID_LENGTH = 8


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36[rem])
    return "".join(reversed(digits))


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def share_id(title: str) -> str:
    """Deterministic 8-char base-36 id from a rolling 32-bit hash of the title."""
    h = 0
    for unit in _utf16_units(title):
        h = _to_int32((h << 5) - h + unit)
    return to_base36(abs(h))[:SHARE_ID_LENGTH].ljust(SHARE_ID_LENGTH, "0")


def ephemeral_id(prefix: str, now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()
    token = "".join(rng.choice(BASE36) for _ in range(9))
    return f"{prefix}-{int(now.timestamp() * 1000)}-{token}"
