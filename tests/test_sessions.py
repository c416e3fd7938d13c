from giftbox.auth.session import DAY_MS, SESSION_DAYS, SessionManager, drop_expired, find_session, issue_session
from giftbox.core.models import Document, now_ms


def test_created_token_resolves_to_its_user(store):
    sessions = SessionManager(store)
    token = sessions.create("u1")
    assert len(token) == 48
    sess = sessions.resolve(token)
    assert sess is not None
    assert sess.user_id == "u1"
    assert sess.is_valid(now_ms())


def test_session_lasts_seven_days():
    doc = Document()
    token = issue_session(doc, "u1", now=1_000)
    assert doc.sessions == [{"token": token, "userId": "u1", "expires": 1_000 + 7 * DAY_MS}]


def test_unknown_or_empty_token_resolves_to_none(store):
    sessions = SessionManager(store)
    sessions.create("u1")
    assert sessions.resolve("") is None
    assert sessions.resolve("deadbeef") is None


def test_expired_session_is_never_resolved():
    doc = Document()
    token = issue_session(doc, "u1", now=0)
    assert find_session(doc, token, now=7 * DAY_MS - 1) is not None
    assert find_session(doc, token, now=7 * DAY_MS) is None
    assert find_session(doc, token) is None


def test_session_with_past_expiry_is_inert_until_cleanup(store):
    def _plant(doc):
        doc.sessions.append({"token": "old", "userId": "u1", "expires": now_ms() - 1})
    store.mutate(_plant)

    sessions = SessionManager(store)
    assert sessions.resolve("old") is None
    assert store.read(lambda doc: len(doc.sessions)) == 1


def test_cleanup_removes_exactly_the_expired_sessions(store):
    sessions = SessionManager(store)
    live = sessions.create("u1")

    def _plant(doc):
        doc.sessions.append({"token": "old-1", "userId": "u2", "expires": now_ms() - 10})
        doc.sessions.append({"token": "old-2", "userId": "u3", "expires": 0})
    store.mutate(_plant)

    assert sessions.cleanup() == 2
    assert store.read(lambda doc: [s["token"] for s in doc.sessions]) == [live]
    assert sessions.resolve(live) is not None
    assert sessions.cleanup() == 0


def test_drop_expired_tolerates_malformed_expiry():
    doc = Document(sessions=[{"token": "a", "expires": "soon"}, {"token": "b", "expires": 10}])
    assert drop_expired(doc, now=5) == 1
    assert [s["token"] for s in doc.sessions] == ["b"]


def test_session_lifetime_ignores_the_environment(monkeypatch):
    monkeypatch.setenv("GIFTBOX_SESSION_DAYS", "abc")
    doc = Document()
    issue_session(doc, "u1", now=0)
    assert doc.sessions[0]["expires"] == SESSION_DAYS * DAY_MS == 7 * DAY_MS


def test_malformed_expiry_never_resolves():
    doc = Document(sessions=[{"token": "t", "userId": "u1", "expires": "soon"}])
    assert find_session(doc, "t", now=0) is None


def test_resolved_session_is_valid_at_lookup_time():
    doc = Document()
    token = issue_session(doc, "u1", now=0)
    sess = find_session(doc, token, now=DAY_MS)
    assert sess.is_valid(DAY_MS)
    assert not sess.is_valid(sess.expires)
