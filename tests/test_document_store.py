import json
import os

import pytest

from giftbox.core.models import Document
from giftbox.errors import NotFound, ValidationError
from giftbox.infra import document_store as ds
from giftbox.infra.document_store import DocumentStore, decode_document


def _add_user(phone):
    def _fn(doc):
        doc.users.append({"id": phone, "phone": phone, "isAdmin": False})
        return len(doc.users)
    return _fn


def test_first_load_creates_an_empty_sealed_file(db_path, envelope):
    store = DocumentStore(db_path, envelope)
    doc = store.load()
    assert doc.to_dict() == {"users": [], "gifts": [], "sessions": []}
    assert db_path.exists()
    assert json.loads(envelope.open(db_path.read_bytes())) == {"users": [], "gifts": [], "sessions": []}


def test_mutations_survive_a_restart(store, db_path, envelope):
    store.mutate(_add_user("0812345678"))
    reopened = DocumentStore(db_path, envelope)
    doc = reopened.load()
    assert [u["phone"] for u in doc.users] == ["0812345678"]


def test_file_never_holds_plaintext(store, db_path):
    store.mutate(_add_user("0812345678"))
    assert b"0812345678" not in db_path.read_bytes()


def test_unknown_fields_are_kept(store, db_path, envelope):
    def _fn(doc):
        doc.gifts.append({"id": "g1", "type": "sticker", "claimedBy": [], "note": {"x": 1}})
    store.mutate(_fn)
    doc = DocumentStore(db_path, envelope).load()
    assert doc.gifts[0]["note"] == {"x": 1}
    assert doc.gifts[0]["type"] == "sticker"


def test_corrupt_file_falls_back_to_empty_document(store, db_path, envelope):
    store.mutate(_add_user("0812345678"))
    blob = bytearray(db_path.read_bytes())
    blob[-1] ^= 0xFF
    db_path.write_bytes(bytes(blob))

    doc = DocumentStore(db_path, envelope).load()
    assert doc.to_dict() == {"users": [], "gifts": [], "sessions": []}
    # the empty document was written back and is readable
    assert json.loads(envelope.open(db_path.read_bytes()))["users"] == []


def test_undecodable_plaintext_falls_back_to_empty_document(db_path, envelope):
    db_path.parent.mkdir(parents=True)
    db_path.write_bytes(envelope.seal(b'{"users": "nope"}'))
    doc = DocumentStore(db_path, envelope).load()
    assert doc.users == []


def test_failed_mutation_writes_nothing(store, db_path):
    store.mutate(_add_user("a"))
    before = db_path.read_bytes()

    def _boom(doc):
        doc.users.append({"id": "b"})
        raise ValidationError("nope")

    with pytest.raises(ValidationError):
        store.mutate(_boom)
    assert store.read(lambda doc: [u["id"] for u in doc.users]) == ["a"]
    assert db_path.read_bytes() == before


def test_save_failure_is_logged_not_raised(store, db_path, monkeypatch, caplog):
    def _fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(ds.os, "replace", _fail)
    assert store.mutate(_add_user("a")) == 1
    assert store.read(lambda doc: len(doc.users)) == 1
    assert "Failed to save database" in caplog.text
    # no temp file left behind
    assert sorted(p.name for p in db_path.parent.iterdir()) == ["db.enc"]


def test_save_writes_through_a_temp_file(store, db_path, monkeypatch):
    seen = []
    real_replace = os.replace

    def _spy(src, dst):
        seen.append((os.path.dirname(src), os.path.basename(src), str(dst)))
        return real_replace(src, dst)

    monkeypatch.setattr(ds.os, "replace", _spy)
    store.mutate(_add_user("a"))
    assert len(seen) == 1
    src_dir, src_name, dst = seen[0]
    assert src_dir == str(db_path.parent)
    assert src_name.startswith(".db-")
    assert dst == str(db_path)


def test_restore_replaces_the_whole_document(store, db_path, envelope):
    store.mutate(_add_user("a"))
    stats = store.restore(Document(users=[{"id": "z"}], gifts=[], sessions=[]))
    assert stats == {"users": 1, "gifts": 0, "sessions": 0}
    assert DocumentStore(db_path, envelope).load().users == [{"id": "z"}]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        {"users": [], "gifts": []},
        {"users": {}, "gifts": [], "sessions": []},
        {"users": [1], "gifts": [], "sessions": []},
    ],
)
def test_structurally_invalid_documents_are_rejected(raw):
    with pytest.raises(ValidationError):
        Document.from_dict(raw)


def test_decode_rejects_non_json():
    with pytest.raises(ValidationError):
        decode_document(b"\xff\xfe")


def test_read_envelope_before_first_write(db_path, envelope):
    store = DocumentStore(db_path, envelope)
    with pytest.raises(NotFound):
        store.read_envelope()


def test_read_envelope_returns_the_file(store, db_path):
    assert store.read_envelope() == db_path.read_bytes()


def test_snapshot_is_detached(store):
    store.mutate(_add_user("a"))
    snap = store.snapshot()
    snap["users"].clear()
    assert store.read(lambda doc: len(doc.users)) == 1
