"""Small helpers: random labels, truncation and password generation."""

from __future__ import annotations

import logging
import random
import string

logger = logging.getLogger(__name__)

MAX_BYTE_SIZE = 64

CLUSTER_ADMIN_USERNAME = "cluster-admin"
CLUSTER_ADMIN_GROUP = "cluster-admins"

_LETTERS = string.ascii_lowercase
_DIGITS = string.digits

_UPPERCASE = string.ascii_uppercase
_SPECIAL = "!#$^&*()-_=+{}|;:,.<>?/~`"
_ALL_CHARS = _LETTERS + _UPPERCASE + _DIGITS + _SPECIAL

_rng = random.Random()


def random_label(size: int) -> str:
    """Return a label of ``size`` characters.

    Characters at even positions are lowercase letters and characters at odd
    positions are digits, all derived from one random number.
    """
    value = _rng.getrandbits(63)
    chars = [""] * size
    for position in reversed(range(size)):
        if position % 2 == 0:
            value, index = divmod(value, len(_LETTERS))
            chars[position] = _LETTERS[index]
        else:
            value, index = divmod(value, len(_DIGITS))
            chars[position] = _DIGITS[index]
    return "".join(chars)


def truncate(s: str, truncate_length: int) -> str:
    """Return ``s`` cut down to at most ``truncate_length`` characters."""
    if len(s) > truncate_length:
        return s[:truncate_length]
    return s


def generate_password(length: int) -> str:
    """Return a shuffled password of at least four characters.

    It always holds one lowercase letter, one uppercase letter, one digit and
    one special character; the rest is filled from all of them.
    """
    password = [
        _rng.choice(_LETTERS),
        _rng.choice(_UPPERCASE),
        _rng.choice(_DIGITS),
        _rng.choice(_SPECIAL),
    ]
    while len(password) < length:
        password.append(_rng.choice(_ALL_CHARS))
    _rng.shuffle(password)
    logger.info("Generate squid password finished.")
    return "".join(password)