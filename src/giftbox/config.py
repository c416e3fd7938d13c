# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Environment-driven settings.

Values are read on every call so tests (and reloads) can change the environment
without touching module state.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PASSPHRASE = "dev_change_this_passphrase"
DB_FILENAME = "db.enc"
TRUTHY = {"1", "true", "yes", "y"}


def environment() -> str:
    return os.getenv("GIFTBOX_ENV", "development").strip().lower()


def is_production() -> bool:
    return environment() == "production"


def data_dir() -> Path:
    return Path(os.getenv("GIFTBOX_DATA_DIR", "data")).resolve()


def db_path() -> Path:
    return data_dir() / DB_FILENAME


def passphrase() -> str:
    """Return the envelope passphrase.

    Falls back to a well-known development value, which is refused outright in
    production and logged loudly everywhere else.
    """
    value = os.getenv("GIFTBOX_DB_PASSPHRASE") or os.getenv("DB_PASSPHRASE")
    if value:
        return value
    if is_production():
        raise RuntimeError("Missing GIFTBOX_DB_PASSPHRASE (or DB_PASSPHRASE) in production")
    logger.warning(
        "Using the default development passphrase for %s (NOT SECURE FOR PRODUCTION). "
        "Set GIFTBOX_DB_PASSPHRASE.",
        DB_FILENAME,
    )
    return DEFAULT_PASSPHRASE


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in TRUTHY
