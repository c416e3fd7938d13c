# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""AES-256-GCM envelope for the data file.

Layout: ``nonce (12) || tag (16) || ciphertext``. Nonce and tag have fixed
lengths, so no length prefix is needed.

The key is scrypt(passphrase) with a fixed, hardcoded salt: every installation
sharing a passphrase derives the same key. The salt can be overridden per call,
but the default must stay as it is or existing data files stop opening.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from giftbox.errors import IntegrityError

DEFAULT_KDF_SALT = b"salt-for-db"
KEY_LEN = 32
NONCE_LEN = 12
TAG_LEN = 16

# scrypt cost (N, r, p)
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1


def derive_key(passphrase: str, *, salt: bytes = DEFAULT_KDF_SALT) -> bytes:
    if not passphrase:
        raise ValueError("Empty passphrase")
    kdf = Scrypt(salt=salt, length=KEY_LEN, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
    return kdf.derive(passphrase.encode("utf-8"))


class CipherEnvelope:
    """Seals and opens byte payloads under one passphrase-derived key."""

    def __init__(self, passphrase: str, *, salt: bytes = DEFAULT_KDF_SALT) -> None:
        self._aead = AESGCM(derive_key(passphrase, salt=salt))

    def seal(self, plaintext: bytes) -> bytes:
        nonce = os.urandom(NONCE_LEN)
        # AESGCM appends the tag to the ciphertext; the file keeps it up front.
        sealed = self._aead.encrypt(nonce, plaintext, None)
        ciphertext, tag = sealed[:-TAG_LEN], sealed[-TAG_LEN:]
        return nonce + tag + ciphertext

    def open(self, envelope: bytes) -> bytes:
        if len(envelope) < NONCE_LEN + TAG_LEN:
            raise IntegrityError("envelope too short")
        nonce = envelope[:NONCE_LEN]
        tag = envelope[NONCE_LEN:NONCE_LEN + TAG_LEN]
        ciphertext = envelope[NONCE_LEN + TAG_LEN:]
        try:
            return self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as e:
            raise IntegrityError() from e


def seal(plaintext: bytes, passphrase: str, *, salt: bytes = DEFAULT_KDF_SALT) -> bytes:
    return CipherEnvelope(passphrase, salt=salt).seal(plaintext)


def unseal(envelope: bytes, passphrase: str, *, salt: bytes = DEFAULT_KDF_SALT) -> bytes:
    """Open an envelope. Raises IntegrityError on any tampering or malformed input."""
    return CipherEnvelope(passphrase, salt=salt).open(envelope)
