import io

import pytest

from app import create_app

ADMIN_PASS = "s3cret-pass"


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def make_app(data_dir):
    def _make(**overrides):
        cfg = {
            "DATA_DIR": str(data_dir),
            "ADMIN_PASS": ADMIN_PASS,
            "JWT_SECRET": "test-secret-0123456789abcdef0123456789",
            "MAX_FILE_BYTES": 4096,
            "RATE_LIMIT_ENABLED": "false",
            "LOGS_DIR": "",
        }
        cfg.update(overrides)
        app = create_app(cfg)
        app.config["TESTING"] = True
        return app
    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    r = c.post("/admin", json={"pass": ADMIN_PASS})
    assert r.status_code == 200
    return c


def confirm_age(client, room):
    client.post(f"/age-ok/{room}")


def upload(client, room, payload=b"x" * 1024, filename="cat.png", mimetype="image/png", **kw):
    return client.post(
        f"/upload/{room}",
        data={"file": (io.BytesIO(payload), filename, mimetype)},
        content_type="multipart/form-data",
        **kw,
    )
