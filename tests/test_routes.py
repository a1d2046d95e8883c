"""
Postpad — End-to-End Route Tests
==================================

What:  Full HTTP flows through the app: forms, cookies, redirects, status codes.
How:   HTTPX AsyncClient over ASGITransport against a per-test SQLite database.
       Redirects are not followed so every 302 and its Location is asserted.

What we test:
    ✅ Register → 302 /succes with a session cookie that verifies
    ✅ Duplicate registration and missing fields → 400 plain text
    ✅ Unknown email and wrong password get identical responses
    ✅ Create/edit/delete posts, including a non-owner edit (403)
    ✅ Session gate: no cookie, bad cookie, expired cookie
    ✅ Unknown paths → 404 "404 - Page not found"
    ✅ JSON bodies are accepted wherever a form is
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from postpad.auth.tokens import TokenIssuer

EDIT_ACTION = re.compile(r'action="/edit/([0-9a-f-]{36})"')


async def _register(client, form):
    return await client.post("/register", data=form)


async def _post_ids(client):
    resp = await client.get("/profile")
    assert resp.status_code == 200
    return EDIT_ACTION.findall(resp.text)


def _set_cookie_headers(resp):
    return [h.lower() for h in resp.headers.get_list("set-cookie")]


class TestPages:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "/login", "/register"])
    async def test_login_page(self, client, path):
        resp = await client.get(path)
        assert resp.status_code == 200
        assert 'action="/login"' in resp.text
        assert 'action="/register"' in resp.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/nope", "/profile/extra", "/static/missing.css"])
    async def test_unknown_path(self, client, path):
        resp = await client.get(path)
        assert resp.status_code == 404
        assert resp.text == "404 - Page not found"

    @pytest.mark.asyncio
    async def test_wrong_method_is_not_found(self, client):
        resp = await client.get("/dash")
        assert resp.status_code == 404
        assert resp.text == "404 - Page not found"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        resp = await client.get("/login")
        assert resp.headers.get("x-request-id")

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, client):
        resp = await client.get("/login", headers={"X-Request-ID": "abc123"})
        assert resp.headers["x-request-id"] == "abc123"

    @pytest.mark.asyncio
    async def test_static_assets_served(self, client):
        resp = await client.get("/static/js/script.js")
        assert resp.status_code == 200


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_sets_cookie(self, app, client, alice_form):
        resp = await _register(client, alice_form)

        assert resp.status_code == 302
        assert resp.headers["location"] == "/succes"
        cookie = _set_cookie_headers(resp)[0]
        assert cookie.startswith("token=")
        assert "httponly" in cookie

        claims = app.state.token_issuer.verify(resp.cookies["token"])
        assert claims["email"] == "a@x.com"
        assert claims["username"] == "alice"
        assert claims["age"] == 30

    @pytest.mark.asyncio
    async def test_success_page_shows_identity(self, client, alice_form):
        await _register(client, alice_form)
        resp = await client.get("/succes")

        assert resp.status_code == 200
        assert "alice" in resp.text
        assert "a@x.com" in resp.text

    @pytest.mark.asyncio
    async def test_success_page_without_session(self, client):
        resp = await client.get("/succes")
        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"

    @pytest.mark.asyncio
    async def test_success_page_clears_bad_cookie(self, client):
        client.cookies.set("token", "garbage")

        resp = await client.get("/succes")

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        assert any(h.startswith("token=") and "max-age=0" in h for h in _set_cookie_headers(resp))

    @pytest.mark.asyncio
    async def test_success_page_clears_expired_cookie(self, app, make_client, alice_form):
        registered = make_client()
        await _register(registered, alice_form)
        claims = app.state.token_issuer.verify(registered.cookies["token"])
        expired = app.state.token_issuer.issue(
            {k: claims[k] for k in ("email", "userid", "username", "age")},
            now=datetime.now(timezone.utc) - timedelta(minutes=61),
        )
        client = make_client()
        client.cookies.set("token", expired)

        resp = await client.get("/succes")

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        assert any(h.startswith("token=") and "max-age=0" in h for h in _set_cookie_headers(resp))

    @pytest.mark.asyncio
    async def test_password_over_72_bytes(self, make_client, alice_form):
        long_password = "p" * 80

        resp = await _register(make_client(), {**alice_form, "password": long_password})
        assert resp.status_code == 302
        assert resp.headers["location"] == "/succes"

        login = await make_client().post("/login", data={"email": "a@x.com", "password": long_password})
        assert login.status_code == 302
        assert login.headers["location"] == "/profile"

    @pytest.mark.asyncio
    async def test_register_with_json_body(self, app, client):
        resp = await client.post(
            "/register",
            json={"username": "alice", "email": "a@x.com", "password": "pw123", "age": 30},
        )

        assert resp.status_code == 302
        assert resp.headers["location"] == "/succes"
        claims = app.state.token_issuer.verify(resp.cookies["token"])
        assert claims["email"] == "a@x.com"
        assert claims["age"] == 30

    @pytest.mark.asyncio
    async def test_json_missing_field(self, client):
        resp = await client.post(
            "/register",
            json={"username": "alice", "email": "a@x.com", "password": "pw123", "age": None},
        )

        assert resp.status_code == 400
        assert resp.text == "All fields are required!"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"{not json", b'{"username": {"first": "alice"}}'])
    async def test_unusable_json_body(self, client, body):
        resp = await client.post(
            "/register", content=body, headers={"content-type": "application/json"}
        )

        assert resp.status_code == 400
        assert "set-cookie" not in resp.headers

    @pytest.mark.asyncio
    async def test_duplicate_email(self, make_client, alice_form):
        await _register(make_client(), alice_form)

        resp = await _register(make_client(), {**alice_form, "username": "eve", "password": "x"})

        assert resp.status_code == 400
        assert resp.text == "User already exists"
        assert "set-cookie" not in resp.headers

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["username", "email", "password", "age"])
    async def test_missing_field(self, client, alice_form, field):
        form = dict(alice_form)
        del form[field]

        resp = await _register(client, form)

        assert resp.status_code == 400
        assert resp.text == "All fields are required!"


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_redirects_to_profile(self, make_client, alice_form):
        await _register(make_client(), alice_form)
        client = make_client()

        resp = await client.post("/login", data={"email": "a@x.com", "password": "pw123"})

        assert resp.status_code == 302
        assert resp.headers["location"] == "/profile"
        assert (await client.get("/profile")).status_code == 200

    @pytest.mark.asyncio
    async def test_login_with_json_body(self, make_client, alice_form):
        await _register(make_client(), alice_form)
        client = make_client()

        resp = await client.post("/login", json={"email": "a@x.com", "password": "pw123"})

        assert resp.status_code == 302
        assert resp.headers["location"] == "/profile"
        assert (await client.get("/profile")).status_code == 200

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable(self, make_client, alice_form):
        await _register(make_client(), alice_form)

        wrong = await make_client().post("/login", data={"email": "a@x.com", "password": "nope"})
        unknown = await make_client().post("/login", data={"email": "z@x.com", "password": "pw123"})

        assert wrong.status_code == unknown.status_code == 400
        assert wrong.text == unknown.text == "Invalid email or password"
        assert "set-cookie" not in wrong.headers
        assert "set-cookie" not in unknown.headers

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, client, alice_form):
        await _register(client, alice_form)

        resp = await client.get("/logout")

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        assert any("max-age=0" in h for h in _set_cookie_headers(resp))
        assert (await client.get("/profile")).status_code == 302


class TestSessionGate:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path", [
        ("GET", "/profile"),
        ("POST", "/dash"),
        ("POST", "/edit/00000000-0000-0000-0000-000000000000"),
        ("POST", "/delete/00000000-0000-0000-0000-000000000000"),
    ])
    async def test_no_cookie_redirects(self, client, method, path):
        resp = await client.request(method, path)

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        assert "set-cookie" not in resp.headers

    @pytest.mark.asyncio
    async def test_bad_cookie_is_cleared(self, client):
        client.cookies.set("token", "garbage")

        resp = await client.get("/profile")

        assert resp.status_code == 302
        assert resp.headers["location"] == "/login"
        assert any(h.startswith("token=") and "max-age=0" in h for h in _set_cookie_headers(resp))

    @pytest.mark.asyncio
    async def test_expired_cookie_is_rejected(self, app, client, alice_form):
        await _register(client, alice_form)
        claims = app.state.token_issuer.verify(client.cookies["token"])
        expired = app.state.token_issuer.issue(
            {"email": claims["email"], "userid": claims["userid"]},
            now=datetime.now(timezone.utc) - timedelta(minutes=61),
        )

        other = TokenIssuer(secret="not-the-app-secret-0123456789abcdefghijkl").issue(
            {"email": claims["email"], "userid": claims["userid"]}
        )

        for token in (expired, other):
            client.cookies.clear()
            client.cookies.set("token", token)
            resp = await client.get("/profile")
            assert resp.status_code == 302
            assert resp.headers["location"] == "/login"


class TestPosts:

    @pytest.mark.asyncio
    async def test_create_shows_on_profile(self, client, alice_form):
        await _register(client, alice_form)

        resp = await client.post("/dash", data={"content": "hello"})
        assert resp.status_code == 302
        assert resp.headers["location"] == "/profile"

        await client.post("/dash", data={"content": "world"})
        profile = await client.get("/profile")

        assert profile.status_code == 200
        assert profile.text.index("hello") < profile.text.index("world")
        assert len(EDIT_ACTION.findall(profile.text)) == 2

    @pytest.mark.asyncio
    async def test_create_and_edit_with_json_body(self, client, alice_form):
        await _register(client, alice_form)

        resp = await client.post("/dash", json={"content": "hello"})
        assert resp.status_code == 302
        [post_id] = await _post_ids(client)

        resp = await client.post(f"/edit/{post_id}", json={"content": "hello, edited"})
        assert resp.status_code == 302
        assert "hello, edited" in (await client.get("/profile")).text

    @pytest.mark.asyncio
    async def test_json_blank_content(self, client, alice_form):
        await _register(client, alice_form)

        resp = await client.post("/dash", json={"content": "  "})

        assert resp.status_code == 400
        assert resp.text == "Post content cannot be empty"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["", "   "])
    async def test_blank_content(self, client, alice_form, content):
        await _register(client, alice_form)

        resp = await client.post("/dash", data={"content": content})

        assert resp.status_code == 400
        assert resp.text == "Post content cannot be empty"
        assert await _post_ids(client) == []

    @pytest.mark.asyncio
    async def test_owner_edit(self, client, alice_form):
        await _register(client, alice_form)
        await client.post("/dash", data={"content": "hello"})
        [post_id] = await _post_ids(client)

        resp = await client.post(f"/edit/{post_id}", data={"content": "hello, edited"})

        assert resp.status_code == 302
        assert "hello, edited" in (await client.get("/profile")).text

    @pytest.mark.asyncio
    async def test_non_owner_edit_forbidden(self, make_client, alice_form, bob_form):
        alice, bob = make_client(), make_client()
        await _register(alice, alice_form)
        await _register(bob, bob_form)
        await alice.post("/dash", data={"content": "hello"})
        [post_id] = await _post_ids(alice)

        resp = await bob.post(f"/edit/{post_id}", data={"content": "hacked"})

        assert resp.status_code == 403
        assert resp.text == "Unauthorized to edit this post"
        profile = (await alice.get("/profile")).text
        assert "hello" in profile
        assert "hacked" not in profile

    @pytest.mark.asyncio
    @pytest.mark.parametrize("post_id", ["00000000-0000-0000-0000-000000000000", "not-an-id"])
    async def test_edit_and_delete_unknown_post(self, client, alice_form, post_id):
        await _register(client, alice_form)

        edit = await client.post(f"/edit/{post_id}", data={"content": "x"})
        delete = await client.post(f"/delete/{post_id}")

        assert edit.status_code == delete.status_code == 404
        assert edit.text == delete.text == "Post not found"

    @pytest.mark.asyncio
    async def test_delete_removes_post_and_reference(self, client, alice_form):
        await _register(client, alice_form)
        await client.post("/dash", data={"content": "first"})
        await client.post("/dash", data={"content": "second"})
        first_id, second_id = await _post_ids(client)

        resp = await client.post(f"/delete/{first_id}")

        assert resp.status_code == 302
        assert await _post_ids(client) == [second_id]
        assert (await client.post(f"/delete/{first_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_non_owner_delete_updates_owner_profile(self, make_client, alice_form, bob_form):
        alice, bob = make_client(), make_client()
        await _register(alice, alice_form)
        await _register(bob, bob_form)
        await alice.post("/dash", data={"content": "hello"})
        [post_id] = await _post_ids(alice)

        resp = await bob.post(f"/delete/{post_id}")

        assert resp.status_code == 302
        assert await _post_ids(alice) == []
