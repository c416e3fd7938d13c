# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import hmac
import os
import secrets
from typing import Tuple

from argon2.profiles import RFC_9106_LOW_MEMORY
from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw

SALT_LEN = 16
HASH_LEN = 32

# Salt and digest are stored separately on the user record, so the raw API is
# used instead of PasswordHasher's encoded strings.
TIME_COST = int(os.getenv("GIFTBOX_HASH_TIME_COST", str(RFC_9106_LOW_MEMORY.time_cost)))
MEMORY_COST = int(os.getenv("GIFTBOX_HASH_MEMORY_COST", str(RFC_9106_LOW_MEMORY.memory_cost)))
PARALLELISM = int(os.getenv("GIFTBOX_HASH_PARALLELISM", str(RFC_9106_LOW_MEMORY.parallelism)))


def _derive(plain: str, salt: bytes) -> bytes:
    return hash_secret_raw(
        secret=plain.encode("utf-8"),
        salt=salt,
        time_cost=TIME_COST,
        memory_cost=MEMORY_COST,
        parallelism=PARALLELISM,
        hash_len=HASH_LEN,
        type=Type.ID,
    )


def hash_password(plain: str) -> Tuple[str, str]:
    """Return ``(salt_hex, digest_hex)`` for a new password."""
    if not plain:
        raise ValueError("Empty password")
    salt = secrets.token_bytes(SALT_LEN)
    return salt.hex(), _derive(plain, salt).hex()


def verify_password(plain: str, salt_hex: str, digest_hex: str) -> bool:
    if not isinstance(plain, str) or not plain or not salt_hex or not digest_hex:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        actual = _derive(plain, salt)
    except (ValueError, TypeError, HashingError):
        return False
    return hmac.compare_digest(actual, expected)
