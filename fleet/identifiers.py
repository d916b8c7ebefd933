"""Helpers for generating vehicle and maintenance record ids."""

import re
import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36."""
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def slugify(text: str) -> str:
    """Lowercase text with whitespace runs collapsed to underscores."""
    return re.sub(r"\s+", "_", text.strip()).lower()


def time_suffix(random_chars: int = 5) -> str:
    """Millisecond timestamp in base 36 plus a random base-36 tail."""
    stamp = to_base36(int(time.time() * 1000))
    tail = "".join(secrets.choice(_ALPHABET) for _ in range(random_chars))
    return f"{stamp}{tail}"


def new_record_id() -> str:
    return f"maint_{time_suffix()}"


def new_vehicle_id(kind_tag: str, model: str) -> str:
    return f"{kind_tag}_{slugify(model) or 'unknown'}_{time_suffix()}"
