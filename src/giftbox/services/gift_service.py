# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from giftbox.core.models import Document, UserRecord, now_ms
from giftbox.errors import AlreadyClaimed, NotFound, ValidationError
from giftbox.infra.document_store import DocumentStore


def _claimed_by(gift: Dict[str, Any]) -> List[str]:
    value = gift.get("claimedBy")
    return value if isinstance(value, list) else []


def create_gift(store: DocumentStore, *, type: str, content: str, created_by: str) -> Dict[str, Any]:
    """Add a gift. ``type`` is free-form (link/text/qr are the usual ones)."""
    if not type or not content:
        raise ValidationError("type and content required")

    def _create(doc: Document):
        gift = {
            "id": str(uuid.uuid4()),
            "type": type,
            "content": content,
            "createdBy": created_by,
            "createdAt": now_ms(),
            "claimedBy": [],
        }
        doc.gifts.append(gift)
        return dict(gift, claimedBy=[])

    return store.mutate(_create)


def gift_view(gift: Dict[str, Any], viewer: Optional[UserRecord]) -> Dict[str, Any]:
    """What ``viewer`` may see of ``gift``.

    Content and the claimer list are shown to admins and to users who already
    claimed the gift; everyone else only gets the claim count.
    """
    claimed = _claimed_by(gift)
    out = {
        "id": gift.get("id"),
        "type": gift.get("type"),
        "createdAt": gift.get("createdAt"),
        "createdBy": gift.get("createdBy"),
        "claimedCount": len(claimed),
    }
    if viewer is not None and (viewer.is_admin or viewer.id in claimed):
        out["content"] = gift.get("content")
        out["claimedBy"] = list(claimed)
    return out


def list_gifts(store: DocumentStore, viewer: Optional[UserRecord]) -> List[Dict[str, Any]]:
    return store.read(lambda doc: [gift_view(g, viewer) for g in doc.gifts])


def claim(store: DocumentStore, gift_id: str, user_id: str) -> str:
    """Record that ``user_id`` claimed the gift and return its content.

    Raises AlreadyClaimed (with the content attached) on a repeat claim.
    """

    def _claim(doc: Document):
        gift = doc.find_gift(gift_id)
        if gift is None:
            raise NotFound("gift not found")
        claimed = _claimed_by(gift)
        if user_id in claimed:
            raise AlreadyClaimed(gift.get("content"))
        gift["claimedBy"] = claimed + [user_id]
        return gift.get("content")

    return store.mutate(_claim)
