# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Admin backup/restore and session housekeeping.

Exports strip password fields from users. Sessions are exported as stored,
live tokens included, so an export must be handled like a credential.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from giftbox.auth.session import drop_expired
from giftbox.core.models import Document, sanitize_user
from giftbox.errors import ValidationError
from giftbox.infra.document_store import DocumentStore

logger = logging.getLogger(__name__)


def export_document(store: DocumentStore) -> Dict[str, Any]:
    data = store.snapshot()
    return {
        "users": [sanitize_user(u) for u in data["users"]],
        "gifts": data["gifts"],
        "sessions": data["sessions"],
    }


def restore_document(store: DocumentStore, raw: Any) -> Dict[str, int]:
    """Replace the whole document. Users without password fields can no longer log in."""
    doc = Document.from_dict(raw)
    missing = sum(1 for u in doc.users if not u.get("passwordHash") or not u.get("passwordSalt"))
    if missing:
        logger.warning("Restored document has %d users without credentials; they cannot log in", missing)
    return store.restore(doc)


def cleanup_sessions(store: DocumentStore) -> Dict[str, int]:
    def _cleanup(doc: Document):
        removed = drop_expired(doc)
        return {"removed": removed, "remaining": len(doc.sessions)}

    result = store.mutate(_cleanup)
    logger.info("Session cleanup: %s", result)
    return result


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def load_backup(path: Path) -> Dict[str, Any]:
    """Read a backup written as JSON (``.json``) or YAML (anything else)."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        if Path(path).suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"cannot parse backup {path}: {e}") from e
    # Exports from the HTTP API wrap the document as {"db": {...}}.
    if isinstance(raw, dict) and "db" in raw and "users" not in raw:
        raw = raw["db"]
    return Document.from_dict(raw).to_dict()
