# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
from typing import Optional

from giftbox.core.models import Document, Session, now_ms
from giftbox.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)

TOKEN_BYTES = 24
SESSION_DAYS = 7
DAY_MS = 24 * 60 * 60 * 1000


def _expires(raw: dict) -> int:
    try:
        return int(raw.get("expires") or 0)
    except (TypeError, ValueError):
        return 0


def issue_session(doc: Document, user_id: str, *, now: Optional[int] = None) -> str:
    """Append a fresh session to ``doc`` and return its token."""
    now = now_ms() if now is None else now
    token = secrets.token_hex(TOKEN_BYTES)
    doc.sessions.append({"token": token, "userId": user_id, "expires": now + SESSION_DAYS * DAY_MS})
    return token


def find_session(doc: Document, token: str, *, now: Optional[int] = None) -> Optional[Session]:
    if not token:
        return None
    now = now_ms() if now is None else now
    for raw in doc.sessions:
        if raw.get("token") != token:
            continue
        sess = Session(token=token, user_id=str(raw.get("userId") or ""), expires=_expires(raw))
        if sess.is_valid(now):
            return sess
    return None


def drop_expired(doc: Document, *, now: Optional[int] = None) -> int:
    now = now_ms() if now is None else now
    before = len(doc.sessions)
    doc.sessions[:] = [s for s in doc.sessions if _expires(s) > now]
    return before - len(doc.sessions)


class SessionManager:
    """Bearer-token sessions kept in the document.

    There is no way to end a valid session early: logging out means the client
    forgets its token.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def create(self, user_id: str) -> str:
        return self.store.mutate(lambda doc: issue_session(doc, user_id))

    def resolve(self, token: str) -> Optional[Session]:
        if not token:
            return None
        return self.store.read(lambda doc: find_session(doc, token))

    def cleanup(self) -> int:
        removed = self.store.mutate(drop_expired)
        logger.info("Removed %d expired sessions", removed)
        return removed
