import time
from urllib.parse import parse_qs, urlsplit

import jwt

from conftest import ADMIN_PASS
from guards import safe_next, secrets_match

SECRET = "test-secret-0123456789abcdef0123456789"


def _is_admin(client):
    return client.get("/api/rooms").get_json()["admin"]


# ---------- admin ----------
def test_wrong_password_is_401(client):
    r = client.post("/admin", json={"pass": "nope"})
    assert r.status_code == 401
    assert r.get_json() == {"ok": False, "msg": "wrong-password"}
    assert not _is_admin(client)


def test_login_sets_http_only_cookie(client):
    r = client.post("/admin", json={"pass": ADMIN_PASS})
    assert r.status_code == 200
    cookie = r.headers["Set-Cookie"]
    assert cookie.startswith("admin=")
    assert "HttpOnly" in cookie
    assert _is_admin(client)


def test_logout_clears_capability(admin_client):
    assert _is_admin(admin_client)
    assert admin_client.post("/admin/logout").get_json() == {"ok": True}
    assert not _is_admin(admin_client)


def test_plain_cookie_value_is_not_admin(client):
    client.set_cookie("admin", "1")
    assert not _is_admin(client)


def test_expired_or_forged_tokens_rejected(client):
    past = int(time.time()) - 3600
    client.set_cookie("admin", jwt.encode({"sub": "admin", "iat": past, "exp": past + 60, "iss": "rooms"},
                                          SECRET, algorithm="HS256"))
    assert not _is_admin(client)
    client.set_cookie("admin", jwt.encode({"sub": "admin", "iat": int(time.time()), "exp": int(time.time()) + 60,
                                           "iss": "rooms"}, "another-secret-another-secret-000000", algorithm="HS256"))
    assert not _is_admin(client)


def test_valid_token_is_admin(client):
    now = int(time.time())
    client.set_cookie("admin", jwt.encode({"sub": "admin", "iat": now, "exp": now + 60, "iss": "rooms"},
                                          SECRET, algorithm="HS256"))
    assert _is_admin(client)


def test_query_token_only_when_enabled(make_app, data_dir):
    (data_dir / "photos").mkdir()
    strict = make_app().test_client()
    assert strict.post(f"/delete-room/photos?admin={ADMIN_PASS}", data={"confirm": "photos"}).status_code == 403
    assert (data_dir / "photos").is_dir()

    loose = make_app(ADMIN_QUERY_TOKEN="true").test_client()
    assert loose.post("/delete-room/photos?admin=wrong", data={"confirm": "photos"}).status_code == 403
    assert loose.post(f"/delete-room/photos?admin={ADMIN_PASS}", data={"confirm": "photos"}).status_code == 302
    assert not (data_dir / "photos").exists()


def test_secrets_match():
    assert secrets_match("abc", "abc")
    assert not secrets_match("abc", "abcd")
    assert not secrets_match(None, "abc")


def test_login_is_rate_limited(make_app):
    client = make_app(RATE_LIMIT_ENABLED="true", LOGIN_RATE_LIMIT="2/minute").test_client()
    assert client.post("/admin", json={"pass": "x"}).status_code == 401
    assert client.post("/admin", json={"pass": "x"}).status_code == 401
    assert client.post("/admin", json={"pass": ADMIN_PASS}).status_code == 429


def test_non_string_password_is_401(client):
    for body in ({"pass": 123}, {"pass": None}, {"pass": {"x": 1}}, ["pass"], "pass"):
        r = client.post("/admin", json=body)
        assert r.status_code == 401
        assert "Set-Cookie" not in r.headers


# ---------- age gate ----------
def test_age_prompt_renders_confirmation_form(client):
    html = client.get("/age?next=/r/photos&room=photos").get_data(as_text=True)
    assert "I am 18 or older" in html
    assert 'value="/r/photos"' in html
    assert 'name="room" value="photos"' in html


def test_age_confirm_sets_cookie_and_resumes(client, data_dir):
    (data_dir / "photos").mkdir()
    r = client.post("/age/confirm", data={"next": "/r/photos", "room": "photos"})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/r/photos")
    assert "age_ok_photos=1" in r.headers["Set-Cookie"]
    assert client.get("/r/photos").status_code == 200


def test_age_confirm_ignores_offsite_next(client):
    r = client.post("/age/confirm", data={"next": "https://evil.example/", "room": "photos"})
    assert r.headers["Location"].endswith("/r/photos")
    r = client.post("/age/confirm", data={"next": "//evil.example/"})
    assert urlsplit(r.headers["Location"]).path == "/"


def test_get_never_confirms(client, data_dir):
    (data_dir / "photos").mkdir()
    client.get("/age?next=/r/photos&room=photos")
    assert client.get("/r/photos").status_code == 302


def test_age_ok_bad_room_is_400(client):
    assert client.post("/age-ok/..%2F").status_code in (400, 404)
    assert client.post("/age-ok/Bad!").status_code == 400


def test_global_age_gate(make_app, data_dir):
    (data_dir / "photos").mkdir()
    (data_dir / "videos").mkdir()
    client = make_app(AGE_GATE="global").test_client()
    r = client.get("/r/photos")
    assert parse_qs(urlsplit(r.headers["Location"]).query)["next"] == ["/r/photos"]
    r = client.post("/age/confirm", data={"next": "/r/photos"})
    assert "age_ok=1" in r.headers["Set-Cookie"]
    assert client.get("/r/photos").status_code == 200
    assert client.get("/r/videos").status_code == 200


def test_age_gate_off(make_app, data_dir):
    (data_dir / "photos").mkdir()
    assert make_app(AGE_GATE="off").test_client().get("/r/photos").status_code == 200


def test_safe_next():
    assert safe_next("/r/photos?x=1") == "/r/photos?x=1"
    assert safe_next("//evil.example") == "/"
    assert safe_next("/\\evil.example") == "/"
    assert safe_next("http://evil.example/r") == "/"
    assert safe_next(None, "/r/a") == "/r/a"
