# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from giftbox import config
from giftbox.auth import users
from giftbox.core.models import UserRecord
from giftbox.errors import Forbidden, GiftBoxError, ValidationError
from giftbox.infra.document_store import DocumentStore
from giftbox.infra.envelope import CipherEnvelope
from giftbox.permissions import current_user_optional, require_admin, require_user
from giftbox.schemas import Credentials, GiftCreate, PasswordConfirm, RestoreRequest
from giftbox.services import backup_service, gift_service

logger = logging.getLogger(__name__)

DB_PATH = config.db_path()

STORE = DocumentStore(DB_PATH, CipherEnvelope(config.passphrase()))
STORE.load()

app = FastAPI(title="Gift Box")
app.state.store = STORE


@app.exception_handler(GiftBoxError)
async def _giftbox_error(request: Request, exc: GiftBoxError):
    return JSONResponse(exc.to_payload(), status_code=exc.status_code)


def _confirm_password(user: UserRecord, password: Optional[str]) -> None:
    if not password:
        raise ValidationError("password required")
    if not users.check_password(user, password):
        raise Forbidden("invalid password")


# ------------------ Accounts ------------------


@app.post("/api/register")
def register(body: Optional[Credentials] = None):
    body = body or Credentials()
    user, token = users.register(STORE, body.phone, body.password)
    return {"user": user, "token": token, "message": "First user -> admin" if user["isAdmin"] else "Registered"}


@app.post("/api/login")
def login(body: Optional[Credentials] = None):
    body = body or Credentials()
    user, token = users.login(STORE, body.phone, body.password)
    return {"user": user, "token": token}


# ------------------ Gifts ------------------


@app.post("/api/gifts")
def create_gift(body: Optional[GiftCreate] = None, user: UserRecord = Depends(require_admin)):
    body = body or GiftCreate()
    gift = gift_service.create_gift(STORE, type=body.type, content=body.content, created_by=user.id)
    return {"gift": gift}


@app.get("/api/gifts")
def list_gifts(viewer: Optional[UserRecord] = Depends(current_user_optional)):
    return gift_service.list_gifts(STORE, viewer)


@app.post("/api/gifts/{gift_id}/claim")
def claim_gift(gift_id: str, body: Optional[Credentials] = None, user: UserRecord = Depends(require_user)):
    body = body or Credentials()
    if not body.phone or not body.password:
        raise ValidationError("phone and password required")
    if body.phone != user.phone:
        raise Forbidden("phone does not match logged-in user")
    if not users.check_password(user, body.password):
        raise ValidationError("invalid credentials")
    content = gift_service.claim(STORE, gift_id, user.id)
    return {"message": "claimed", "content": content}


@app.get("/api/status")
def status():
    stats = STORE.read(lambda doc: doc.stats())
    return {"status": "ok", "users": stats["users"], "gifts": stats["gifts"]}


# ------------------ Admin backup & restore ------------------


@app.get("/api/db/encrypted")
def download_encrypted(user: UserRecord = Depends(require_admin)):
    blob = STORE.read_envelope()
    return Response(
        content=blob,
        media_type="application/octet-stream",
        headers={"Content-Disposition": 'attachment; filename="db.enc"'},
    )


@app.post("/api/db/decrypted")
def download_decrypted(body: Optional[PasswordConfirm] = None, user: UserRecord = Depends(require_admin)):
    body = body or PasswordConfirm()
    _confirm_password(user, body.password)
    return {"db": backup_service.export_document(STORE)}


@app.post("/api/db/restore")
def restore(body: Optional[RestoreRequest] = None, user: UserRecord = Depends(require_admin)):
    body = body or RestoreRequest()
    if not body.password or body.db is None:
        raise ValidationError("password and db required")
    _confirm_password(user, body.password)
    stats = backup_service.restore_document(STORE, body.db)
    logger.info("Database restored by %s", user.id)
    return {"message": "db restored", **stats}


@app.post("/api/admin/cleanup-sessions")
def cleanup_sessions(user: UserRecord = Depends(require_admin)):
    return backup_service.cleanup_sessions(STORE)
