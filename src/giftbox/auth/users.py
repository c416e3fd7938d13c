# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional, Tuple

from giftbox.auth.passwords import hash_password, verify_password
from giftbox.auth.session import issue_session
from giftbox.core.models import Document, UserRecord, now_ms, sanitize_user
from giftbox.errors import ValidationError
from giftbox.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)


def _require(phone: Optional[str], password: Optional[str]) -> None:
    if not phone or not password:
        raise ValidationError("phone and password required")


def get_user(store: DocumentStore, user_id: str) -> Optional[UserRecord]:
    raw = store.read(lambda doc: doc.find_user(user_id))
    return UserRecord.from_dict(raw) if raw else None


def register(store: DocumentStore, phone: str, password: str) -> Tuple[Dict[str, Any], str]:
    """Create a user plus a session in one write. The first user becomes admin."""
    _require(phone, password)
    # Hash outside the lock; it is the slow part.
    salt, digest = hash_password(password)

    def _register(doc: Document):
        if doc.find_user_by_phone(phone):
            raise ValidationError("phone already registered")
        user = {
            "id": str(uuid.uuid4()),
            "phone": phone,
            "passwordSalt": salt,
            "passwordHash": digest,
            "isAdmin": len(doc.users) == 0,
            "createdAt": now_ms(),
        }
        doc.users.append(user)
        token = issue_session(doc, user["id"])
        return sanitize_user(user), token

    user, token = store.mutate(_register)
    if user["isAdmin"]:
        logger.info("First user registered; %s is admin", user["id"])
    return user, token


def login(store: DocumentStore, phone: str, password: str) -> Tuple[Dict[str, Any], str]:
    _require(phone, password)
    raw = store.read(lambda doc: doc.find_user_by_phone(phone))
    if not raw or not check_password(UserRecord.from_dict(raw), password):
        raise ValidationError("invalid credentials")
    user_id = raw.get("id")

    def _login(doc: Document):
        # The user may have vanished through a restore while the hash ran.
        current = doc.find_user(user_id)
        if current is None:
            raise ValidationError("invalid credentials")
        return sanitize_user(current), issue_session(doc, user_id)

    return store.mutate(_login)


def check_password(user: UserRecord, password: Optional[str]) -> bool:
    if not password:
        return False
    return verify_password(password, user.password_salt, user.password_hash)
