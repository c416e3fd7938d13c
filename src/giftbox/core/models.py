# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Persisted document and read-only record views.

The document keeps plain JSON objects (camelCase keys, the on-disk format)
so unknown fields survive a load/save cycle. The dataclasses
below are typed views built from those objects.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from giftbox.errors import ValidationError

SECRET_USER_FIELDS = ("passwordHash", "passwordSalt")
SECTIONS = ("users", "gifts", "sessions")


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Document:
    users: List[Dict[str, Any]] = field(default_factory=list)
    gifts: List[Dict[str, Any]] = field(default_factory=list)
    sessions: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> "Document":
        """Structural check only: three lists of JSON objects."""
        if not isinstance(raw, dict):
            raise ValidationError("db must be an object")
        for name in SECTIONS:
            items = raw.get(name)
            if not isinstance(items, list):
                raise ValidationError("db must contain users, gifts, sessions arrays")
            if not all(isinstance(item, dict) for item in items):
                raise ValidationError(f"every entry in '{name}' must be an object")
        return cls(
            users=list(raw["users"]),
            gifts=list(raw["gifts"]),
            sessions=list(raw["sessions"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"users": self.users, "gifts": self.gifts, "sessions": self.sessions}

    def stats(self) -> Dict[str, int]:
        return {"users": len(self.users), "gifts": len(self.gifts), "sessions": len(self.sessions)}

    def find_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        for u in self.users:
            if u.get("id") == user_id:
                return u
        return None

    def find_user_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        for u in self.users:
            if u.get("phone") == phone:
                return u
        return None

    def find_gift(self, gift_id: str) -> Optional[Dict[str, Any]]:
        for g in self.gifts:
            if g.get("id") == gift_id:
                return g
        return None


@dataclass(frozen=True)
class UserRecord:
    id: str
    phone: str
    is_admin: bool
    created_at: Optional[int]
    password_salt: str = field(default="", repr=False)
    password_hash: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=str(raw.get("id") or ""),
            phone=str(raw.get("phone") or ""),
            is_admin=bool(raw.get("isAdmin", False)),
            created_at=raw.get("createdAt"),
            password_salt=str(raw.get("passwordSalt") or ""),
            password_hash=str(raw.get("passwordHash") or ""),
        )


@dataclass(frozen=True)
class Session:
    token: str
    user_id: str
    expires: int

    def is_valid(self, now: int) -> bool:
        return now < self.expires


def sanitize_user(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a stored user without password fields."""
    return {k: v for k, v in raw.items() if k not in SECRET_USER_FIELDS}
