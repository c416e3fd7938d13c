# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Encrypted single-file document store.

The whole state (users, gifts, sessions) lives in memory and is re-sealed and
rewritten after every mutation. One lock serializes every
read-mutate-persist sequence in the process.
"""

from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, TypeVar

from giftbox.core.models import Document
from giftbox.errors import IntegrityError, NotFound, ValidationError
from giftbox.infra.envelope import CipherEnvelope

logger = logging.getLogger(__name__)

T = TypeVar("T")


def encode_document(doc: Document) -> bytes:
    return json.dumps(doc.to_dict(), ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def decode_document(raw: bytes) -> Document:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"document is not valid JSON: {e}") from e
    return Document.from_dict(data)


class DocumentStore:
    def __init__(self, path: Path, envelope: CipherEnvelope) -> None:
        self.path = Path(path)
        self._envelope = envelope
        self._lock = threading.RLock()
        self._doc = Document()

    def load(self) -> Document:
        """Read the data file, creating it on first run.

        A file that fails authentication or does not decode is replaced by an
        empty document. Whatever it held is lost.
        """
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._doc = Document()
                self.save(self._doc)
                logger.info("New database created at %s", self.path)
                return self._doc

            try:
                self._doc = decode_document(self._envelope.open(self.path.read_bytes()))
            except (IntegrityError, ValidationError) as e:
                logger.error(
                    "Failed to load %s (%s); starting with an empty database. Previous contents are discarded.",
                    self.path,
                    e.message,
                )
                self._doc = Document()
                self.save(self._doc)
                return self._doc

            stats = self._doc.stats()
            logger.info("Database loaded. Users: %d Gifts: %d", stats["users"], stats["gifts"])
            return self._doc

    def save(self, doc: Document) -> bool:
        """Seal and atomically replace the data file. Failures are logged, not raised."""
        tmp_name = None
        try:
            blob = self._envelope.seal(encode_document(doc))
            fd, tmp_name = tempfile.mkstemp(prefix=".db-", suffix=".tmp", dir=str(self.path.parent))
            with os.fdopen(fd, "wb") as fh:
                fh.write(blob)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
            return True
        except OSError:
            logger.exception("Failed to save database to %s", self.path)
            return False
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

    def read(self, fn: Callable[[Document], T]) -> T:
        with self._lock:
            return fn(self._doc)

    def mutate(self, fn: Callable[[Document], T]) -> T:
        """Run ``fn`` on a working copy and commit it.

        If ``fn`` raises, the copy is dropped and nothing is written.
        """
        with self._lock:
            working = copy.deepcopy(self._doc)
            result = fn(working)
            self._doc = working
            self.save(working)
            return result

    def restore(self, doc: Document) -> Dict[str, int]:
        with self._lock:
            self._doc = copy.deepcopy(doc)
            self.save(self._doc)
            stats = self._doc.stats()
        logger.info("Database restored: %s", stats)
        return stats

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the current document as plain JSON data."""
        with self._lock:
            return copy.deepcopy(self._doc.to_dict())

    def read_envelope(self) -> bytes:
        with self._lock:
            if not self.path.exists():
                raise NotFound("db file not found")
            return self.path.read_bytes()
