# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request bodies.

Every field is optional at this level: missing values are reported by the core
as ValidationError (400), not by FastAPI as 422.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class Credentials(BaseModel):
    phone: Optional[str] = None
    password: Optional[str] = None


class GiftCreate(BaseModel):
    type: Optional[str] = None
    content: Optional[str] = None


class PasswordConfirm(BaseModel):
    password: Optional[str] = None


class RestoreRequest(BaseModel):
    password: Optional[str] = None
    db: Optional[Any] = None
