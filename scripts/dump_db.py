#!/usr/bin/env python3
"""Decrypt a data file and print it as YAML, without password fields."""
from __future__ import annotations

import sys
from pathlib import Path

from giftbox import config
from giftbox.core.models import sanitize_user
from giftbox.infra.document_store import decode_document
from giftbox.infra.envelope import unseal
from giftbox.services.backup_service import dump_yaml


def main() -> None:
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else config.db_path()
    doc = decode_document(unseal(path.read_bytes(), config.passphrase()))
    data = doc.to_dict()
    data["users"] = [sanitize_user(u) for u in data["users"]]
    sys.stdout.write(dump_yaml(data))


if __name__ == "__main__":
    main()
