"""Token store / issuer tests."""
from datetime import timedelta
import logging

from sqlalchemy.exc import OperationalError

from app.core.constants import TOKENABLE_USER
from app.core.security import hash_token
from app.models.personal_access_token import PersonalAccessToken
from app.services.session_service import session_validator
from app.services.token_service import TokenService
from app.utils.helpers import utcnow


def test_create_token_persists_one_hashed_row(db_session, make_user):
    user = make_user()
    now = utcnow()

    token, record = TokenService.create_token(db_session, user, "API Login", now=now)

    assert len(token) == 64
    int(token, 16)  # hex
    assert record.token == hash_token(token)
    assert record.token != token
    assert record.tokenable_type == TOKENABLE_USER
    assert record.tokenable_id == user.id
    assert record.name == "API Login"
    assert record.ability_list == ["*"]
    assert record.created_at == now
    assert record.last_used_at == now
    assert record.expires_at == now + timedelta(hours=24)
    assert db_session.query(PersonalAccessToken).count() == 1


def test_tokens_are_unique(db_session, make_user):
    user = make_user()
    tokens = {TokenService.create_token(db_session, user)[0] for _ in range(5)}
    assert len(tokens) == 5


def test_find_by_token(db_session, make_user):
    user = make_user()
    token, record = TokenService.create_token(db_session, user)

    assert TokenService.find_by_token(db_session, token).id == record.id
    assert TokenService.find_by_token(db_session, record.token) is None
    assert TokenService.find_by_token(db_session, "") is None


def test_find_active_session_ignores_expired_rows(db_session, make_user):
    user = make_user()
    now = utcnow()
    TokenService.create_token(db_session, user, now=now - timedelta(hours=30))

    assert TokenService.find_active_session(db_session, user.id, now) is None

    _, live = TokenService.create_token(db_session, user, now=now)
    assert TokenService.find_active_session(db_session, user.id, now).id == live.id
    assert TokenService.find_active_session(db_session, user.id, live.expires_at) is None


def test_token_without_expiry_is_live(db_session, make_user):
    user = make_user()
    _, record = TokenService.create_token(db_session, user)
    record.expires_at = None
    db_session.commit()

    far_future = utcnow() + timedelta(days=3650)
    assert record.is_live(far_future)
    assert TokenService.find_active_session(db_session, user.id, far_future).id == record.id


def test_active_session_is_per_user(db_session, make_user):
    alice, bob = make_user(), make_user()
    TokenService.create_token(db_session, alice)

    assert TokenService.find_active_session(db_session, bob.id) is None


def test_delete_token_is_idempotent(db_session, make_user):
    user = make_user()
    _, keep = TokenService.create_token(db_session, make_user())
    _, record = TokenService.create_token(db_session, user)

    assert TokenService.delete_token(db_session, record) == 1
    assert TokenService.delete_token(db_session, record) == 0
    assert db_session.query(PersonalAccessToken).filter_by(id=keep.id).count() == 1


def test_touch_updates_last_used_only(db_session, make_user):
    user = make_user()
    issued = utcnow() - timedelta(hours=2)
    _, record = TokenService.create_token(db_session, user, now=issued)

    later = issued + timedelta(hours=1)
    assert TokenService.touch(db_session, record, later) is True
    assert record.last_used_at == later
    assert record.expires_at == issued + timedelta(hours=24)


def test_touch_failure_is_logged_and_request_still_authenticates(db_session, make_user, monkeypatch, caplog):
    user = make_user()
    issued = utcnow() - timedelta(hours=1)
    token, record = TokenService.create_token(db_session, user, now=issued)

    def locked_commit():
        raise OperationalError("UPDATE personal_access_tokens", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", locked_commit)
    with caplog.at_level(logging.WARNING, logger="app.services.token_service"):
        auth = session_validator.authenticate(db_session, f"Bearer {token}")

    assert auth.user.id == user.id
    assert auth.token_record.id == record.id
    assert f"Failed to update last_used_at for token {record.id}" in caplog.text

    # Rolled back: the stored stamp is unchanged
    monkeypatch.undo()
    db_session.expire_all()
    stored = db_session.query(PersonalAccessToken).filter_by(id=record.id).one()
    assert stored.last_used_at == issued
