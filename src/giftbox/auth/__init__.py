# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (argon2id, raw salt + digest)
- Registration and login against the encrypted document
- Opaque bearer-token sessions stored in the document
"""
