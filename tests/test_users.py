"""Public profile endpoint: optional authentication."""
from conftest import API, bearer


async def test_public_profile_for_anonymous_caller(async_client, make_user):
    user = make_user(username="public_alice")

    r = await async_client.get(f"{API}/users/public_alice")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["isOwnProfile"] is False
    assert data["user"]["username"] == "public_alice"
    assert data["user"]["id"] == user.id
    assert "email" not in data["user"]
    assert "additionalInfo" not in data["user"]


async def test_owner_sees_private_fields(async_client, make_user, issue_token):
    user = make_user(username="owner_bob")
    token, _ = issue_token(user)

    r = await async_client.get(f"{API}/users/owner_bob", headers=bearer(token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["isOwnProfile"] is True
    assert data["user"]["email"] == user.email


async def test_bad_token_falls_back_to_anonymous(async_client, make_user):
    make_user(username="carol")

    r = await async_client.get(f"{API}/users/carol", headers=bearer("garbage"))
    assert r.status_code == 200
    assert r.json()["data"]["isOwnProfile"] is False


async def test_other_users_token_is_not_owner(async_client, make_user, issue_token):
    make_user(username="dave")
    viewer = make_user()
    token, _ = issue_token(viewer)

    r = await async_client.get(f"{API}/users/dave", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["data"]["isOwnProfile"] is False


async def test_unknown_or_deactivated_user_is_not_found(async_client, make_user):
    make_user(username="gone", is_active=False)

    r = await async_client.get(f"{API}/users/nobody")
    assert r.status_code == 404

    r = await async_client.get(f"{API}/users/gone")
    assert r.status_code == 404
    assert r.json()["success"] is False
