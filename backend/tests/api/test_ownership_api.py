"""API tests for POST /transfer-ownership."""
import pytest


@pytest.fixture
def owned_court(add_facility, add_user):
    add_user("owner-1", "owner@x.com")
    add_user("other-2", "other@x.com")
    return add_facility("C1", owner_id="owner-1", courts=[{"name": "A"}])


def _transfer(client, headers=None, body=None):
    return client.post("/transfer-ownership", json=body, headers=headers or {})


def test_transfer_success(client, auth_header, owned_court, store):
    r = _transfer(client, auth_header("owner-1"), {"courtId": "C1", "newOwnerEmail": "other@x.com"})

    assert r.status_code == 200
    assert r.json() == {"message": "Ownership transferred successfully."}
    assert store.get_facility("C1").owner_id == "other-2"


def test_no_token_is_401(client, owned_court):
    r = _transfer(client, body={"courtId": "C1", "newOwnerEmail": "other@x.com"})

    assert r.status_code == 401
    assert r.json() == {"error": "You must be logged in to perform this action. (No token found)"}


def test_no_token_with_malformed_body_is_401(client, owned_court):
    r = _transfer(client, body={"courtId": 123, "newOwnerEmail": ["other@x.com"]})

    assert r.status_code == 401
    assert r.json() == {"error": "You must be logged in to perform this action. (No token found)"}


@pytest.mark.parametrize(
    "body",
    [
        {"courtId": 123, "newOwnerEmail": "other@x.com"},
        {"courtId": "C1", "newOwnerEmail": None},
        ["C1", "other@x.com"],
    ],
)
def test_non_string_fields_are_missing_fields(client, auth_header, owned_court, store, body):
    r = _transfer(client, auth_header("owner-1"), body)

    assert r.status_code == 400
    assert r.json() == {"error": "Court ID and new owner email are required."}
    assert store.get_facility("C1").owner_id == "owner-1"


def test_unparseable_body_is_missing_fields(client, auth_header, owned_court):
    headers = {**auth_header("owner-1"), "Content-Type": "application/json"}

    r = client.post("/transfer-ownership", content=b"{not json", headers=headers)

    assert r.status_code == 400
    assert r.json() == {"error": "Court ID and new owner email are required."}


def test_invalid_token_is_403(client, owned_court, store):
    r = _transfer(client, {"Authorization": "Bearer not-a-jwt"}, {"courtId": "C1", "newOwnerEmail": "other@x.com"})

    assert r.status_code == 403
    assert r.json() == {"error": "Invalid or expired credentials. Please log in again."}
    assert store.get_facility("C1").owner_id == "owner-1"


@pytest.mark.parametrize(
    "caller,body,status,error",
    [
        ("owner-1", {"courtId": "C1"}, 400, "Court ID and new owner email are required."),
        ("owner-1", {"courtId": "C1", "newOwnerEmail": "bad"}, 400, "Please use a valid email address."),
        ("owner-1", {"courtId": "C1", "newOwnerEmail": "ghost@x.com"}, 404, "No user found with that email address."),
        ("owner-1", {"courtId": "nope", "newOwnerEmail": "other@x.com"}, 404, "Court not found."),
        ("other-2", {"courtId": "C1", "newOwnerEmail": "owner@x.com"}, 403, "You are not the owner of this court."),
        ("owner-1", {"courtId": "C1", "newOwnerEmail": "owner@x.com"}, 400, "You cannot transfer ownership to yourself."),
    ],
)
def test_rejections(client, auth_header, owned_court, caller, body, status, error):
    r = _transfer(client, auth_header(caller), body)

    assert r.status_code == status
    assert r.json() == {"error": error}


def test_store_failure_is_generic_500(client, auth_header, owned_court, monkeypatch):
    from vacantcourt.core.errors import StoreError

    def boom(*args, **kwargs):
        raise StoreError("db down")

    monkeypatch.setattr(client.app.state.store, "find_user_id_by_email", boom)

    r = _transfer(client, auth_header("owner-1"), {"courtId": "C1", "newOwnerEmail": "other@x.com"})

    assert r.status_code == 500
    assert r.json() == {"error": "An internal error occurred."}
