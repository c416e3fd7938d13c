# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Request

from giftbox.auth.session import find_session
from giftbox.core.models import UserRecord
from giftbox.errors import Forbidden, Unauthorized
from giftbox.infra.document_store import DocumentStore


def bearer_token(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    return auth[7:] if auth.startswith("Bearer ") else ""


def _lookup(store: DocumentStore, token: str) -> Optional[UserRecord]:
    def _find(doc):
        sess = find_session(doc, token)
        if not sess:
            return None
        raw = doc.find_user(sess.user_id)
        return UserRecord.from_dict(raw) if raw else None

    return store.read(_find)


def authenticate(store: DocumentStore, token: str) -> UserRecord:
    u = _lookup(store, token) if token else None
    if not u:
        raise Unauthorized()
    return u


def authorize_admin(store: DocumentStore, token: str) -> UserRecord:
    u = authenticate(store, token)
    if not u.is_admin:
        raise Forbidden()
    return u


# FastAPI dependencies. The store lives on app.state so tests can swap it.


def current_user_optional(request: Request) -> Optional[UserRecord]:
    token = bearer_token(request)
    if not token:
        return None
    return _lookup(request.app.state.store, token)


def require_user(request: Request) -> UserRecord:
    return authenticate(request.app.state.store, bearer_token(request))


def require_admin(request: Request) -> UserRecord:
    return authorize_admin(request.app.state.store, bearer_token(request))
