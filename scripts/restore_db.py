#!/usr/bin/env python3
"""Write a JSON/YAML backup into the encrypted data file (full replacement).

Stop the server first: it keeps its own copy in memory and will overwrite
the file on its next write.
"""
from __future__ import annotations

import sys
from pathlib import Path

from giftbox import config
from giftbox.core.models import Document
from giftbox.infra.document_store import DocumentStore
from giftbox.infra.envelope import CipherEnvelope
from giftbox.services.backup_service import load_backup


def main() -> None:
    if len(sys.argv) < 2:
        raise SystemExit("Usage: restore_db.py <backup.json|backup.yml> [db.enc]")
    backup = Path(sys.argv[1])
    target = Path(sys.argv[2]) if len(sys.argv) > 2 else config.db_path()

    answer = input(f"Replace {target} with {backup}? [y/N]: ").strip().lower()
    if answer != "y":
        raise SystemExit("Aborted")

    target.parent.mkdir(parents=True, exist_ok=True)
    store = DocumentStore(target, CipherEnvelope(config.passphrase()))
    stats = store.restore(Document.from_dict(load_backup(backup)))
    print(f"OK -> {target} {stats}")


if __name__ == "__main__":
    main()
