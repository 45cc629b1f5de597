import pytest

from app import create_app

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def app_config(tmp_path):
    return {
        "TESTING": True,
        "SECRET_KEY": TEST_SECRET,
        "JWT_SECRET_KEY": TEST_SECRET,
        "BCRYPT_LOG_ROUNDS": 4,
        "RECORD_STORE": "json",
        "DATA_DIR": str(tmp_path / "data"),
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "CONTRACT_COMPRESS": False,
    }


@pytest.fixture
def app(app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    return app.test_client()


def signup(client, username, password="secret-pw", role="farmer"):
    return client.post("/signup", json={"username": username, "password": password, "role": role})


def login(client, username, password="secret-pw"):
    return client.post("/login", json={"username": username, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def token_for(client, username, role):
    assert signup(client, username, role=role).status_code == 201
    resp = login(client, username)
    assert resp.status_code == 200
    return resp.get_json()["token"]


@pytest.fixture
def farmer_headers(client):
    return bearer(token_for(client, "fiona", "farmer"))


@pytest.fixture
def buyer_headers(client):
    return bearer(token_for(client, "bob", "buyer"))


CROP_FIELDS = {
    "name": "Wheat",
    "description": "Durum wheat, harvested last week",
    "location": "Kanpur",
    "price": "2.5",
}
