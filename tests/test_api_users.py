"""
tests/test_api_users.py -- Integration tests for POST/GET /users and POST /sessions.

These tests exercise the full stack: FastAPI routing -> auth dependency ->
UserStore/OrderStore -> response model serialization.

Fixtures used (from conftest.py):
  - api_client: (client, token, user_id) -- Emma is already signed up.
"""

from __future__ import annotations

from conftest import EMMA, EMMAS_CAKE, ApiContext, signup


class TestSignup:
    """POST /users: account creation."""

    def test_signup_returns_token(self, api_client: ApiContext) -> None:
        """POST /users with valid fields must return 201 with userId and a 256-char accessToken."""
        client = api_client.client
        resp = client.post("/users", json={"name": "Olle", "email": "olle@olle.se", "password": "olleolle"})
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["message"] == "User created."
        assert data["userId"]
        assert len(data["accessToken"]) == 256

    def test_signup_token_authorizes_requests(self, api_client: ApiContext) -> None:
        """The token returned by signup must authorize a token-gated route."""
        client = api_client.client
        data = signup(client, "Stina", "stina@example.com")
        resp = client.get(f"/users/{data['userId']}", headers={"Authorization": data["accessToken"]})
        assert resp.status_code == 200
        assert resp.json()["email"] == "stina@example.com"

    def test_duplicate_email(self, api_client: ApiContext) -> None:
        """Signing up with a registered email must return 400 with an email error."""
        client = api_client.client
        resp = client.post("/users", json={"name": "Other", "email": EMMA["email"], "password": "whatever"})
        assert resp.status_code == 400
        data = resp.json()
        assert data["message"] == "Could not create user."
        assert "email" in data["errors"]

    def test_validation_errors(self, api_client: ApiContext) -> None:
        """Empty name, malformed email and short password must each be reported."""
        client = api_client.client
        resp = client.post("/users", json={"name": "", "email": "nope", "password": "abc"})
        assert resp.status_code == 400
        assert set(resp.json()["errors"]) == {"name", "email", "password"}

    def test_missing_body_fields(self, api_client: ApiContext) -> None:
        """An empty JSON object must return 400 naming every required field."""
        resp = api_client.client.post("/users", json={})
        assert resp.status_code == 400
        assert set(resp.json()["errors"]) == {"name", "email", "password"}

    def test_wrong_types_are_400(self, api_client: ApiContext) -> None:
        """Non-string field values must return 400, not 422."""
        resp = api_client.client.post("/users", json={"name": ["Emma"], "email": 1, "password": {}})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Request validation failed."

    def test_malformed_json_is_400(self, api_client: ApiContext) -> None:
        """An unparseable body must return 400."""
        resp = api_client.client.post(
            "/users", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400


class TestListUsers:
    """GET /users: public user directory."""

    def test_public_and_projected(self, api_client: ApiContext) -> None:
        """GET /users without a token must return 200 with only id, name, email and createdAt."""
        resp = api_client.client.get("/users")
        assert resp.status_code == 200
        users = resp.json()
        assert users
        for user in users:
            assert set(user) == {"id", "name", "email", "createdAt"}

    def test_newest_first_and_capped(self, api_client: ApiContext) -> None:
        """After 21 signups the listing holds the newest 20, newest first."""
        client = api_client.client
        created = [signup(client, f"Bulk {i}", f"bulk{i}@example.com")["userId"] for i in range(21)]
        users = client.get("/users").json()
        assert len(users) == 20
        assert [u["id"] for u in users] == list(reversed(created))[:20]
        stamps = [u["createdAt"] for u in users]
        assert stamps == sorted(stamps, reverse=True)


class TestGetUser:
    """GET /users/{id}: token-gated profile."""

    def test_requires_token(self, api_client: ApiContext) -> None:
        """GET /users/{id} without Authorization must return 401 with loggedOut."""
        resp = api_client.client.get(f"/users/{api_client.user_id}")
        assert resp.status_code == 401
        assert resp.json()["loggedOut"] is True

    def test_invalid_token(self, api_client: ApiContext) -> None:
        """An unknown token must return 401."""
        resp = api_client.client.get(f"/users/{api_client.user_id}", headers={"Authorization": "garbage"})
        assert resp.status_code == 401

    def test_profile_lists_orders(self, api_client: ApiContext) -> None:
        """The profile must resolve orderedCakes and never expose the token or password digest."""
        client, token, user_id = api_client
        order = client.post("/cakeorders", json=EMMAS_CAKE, headers={"Authorization": token}).json()
        resp = client.get(f"/users/{user_id}", headers={"Authorization": token})
        assert resp.status_code == 200
        profile = resp.json()
        assert profile["name"] == "Emma"
        assert "accessToken" not in profile
        assert "hashedPassword" not in profile
        assert order["id"] in [o["id"] for o in profile["orderedCakes"]]

    def test_not_found(self, api_client: ApiContext) -> None:
        """An unknown user id must return 400 with a message."""
        resp = api_client.client.get("/users/does-not-exist", headers={"Authorization": api_client.token})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Could not find user."


class TestSessions:
    """POST /sessions: sign-in."""

    def test_sign_in(self, api_client: ApiContext) -> None:
        """Correct credentials must return 200 with the stored userId and accessToken."""
        client, token, user_id = api_client
        resp = client.post("/sessions", json={"email": EMMA["email"], "password": EMMA["password"]})
        assert resp.status_code == 200
        assert resp.json() == {"userId": user_id, "accessToken": token}

    def test_sign_in_email_case_insensitive(self, api_client: ApiContext) -> None:
        """Email matching ignores case."""
        resp = api_client.client.post("/sessions", json={"email": "EMMA@emma.se", "password": EMMA["password"]})
        assert resp.status_code == 200

    def test_wrong_password(self, api_client: ApiContext) -> None:
        """A wrong password must return 400 with notFound."""
        resp = api_client.client.post("/sessions", json={"email": EMMA["email"], "password": "wrong"})
        assert resp.status_code == 400
        assert resp.json() == {"notFound": True}

    def test_unknown_email_same_response(self, api_client: ApiContext) -> None:
        """Unknown email and wrong password must be indistinguishable."""
        client = api_client.client
        wrong_password = client.post("/sessions", json={"email": EMMA["email"], "password": "wrong"})
        unknown_email = client.post("/sessions", json={"email": "ghost@emma.se", "password": "wrong"})
        assert wrong_password.status_code == unknown_email.status_code
        assert wrong_password.json() == unknown_email.json()

    def test_missing_fields(self, api_client: ApiContext) -> None:
        """A body with no credentials must return 400 with notFound."""
        resp = api_client.client.post("/sessions", json={})
        assert resp.status_code == 400
        assert resp.json() == {"notFound": True}
