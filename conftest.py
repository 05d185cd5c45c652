"""Test configuration and shared fixtures"""

import os
import sys
import traceback

# the app refuses to start without a secret key
os.environ.setdefault("CARDHUB_SECRET_KEY", "cardhub-test-secret")

import pytest
from cardhub.app import app
from cardhub.config import Config, get_config
from cardhub.db import DatabaseConnection
from cardhub.dependencies.services import ServiceContainer
from cardhub.uow import UnitOfWork
from fastapi.testclient import TestClient

STAFF_TOKEN = "staff-token-000"

_original_request = TestClient.request


def logging_request(self, *args, **kwargs):
    try:
        response = _original_request(self, *args, **kwargs)
    except Exception:
        print("\n=== Exception in TestClient.request ===")
        print("Request args:", args)
        print("Request kwargs:", kwargs)
        traceback.print_exc(file=sys.stdout)
        raise

    if response.status_code >= 400:
        req = response.request
        print("\n=== HTTP Error Response Captured ===")
        print(f"Method: {req.method} URL: {req.url}")
        print("Request Content:", req.content)
        print("Response Status:", response.status_code)
        print("Response Body:", response.text)
    return response


TestClient.request = logging_request


def make_test_config() -> Config:
    return Config(
        # overwrite application name so it will use another database file
        app_name="cardhub-test",
        secret_key="cardhub-test-secret",
        api_tokens=[STAFF_TOKEN],
    )


# each test class have it's own empty database
@pytest.fixture(scope="class")
def test_app():
    test_config = make_test_config()
    if os.path.exists(test_config.database_path):
        os.remove(test_config.database_path)
    app.dependency_overrides = {get_config: lambda: test_config}

    db_conn = DatabaseConnection(config=test_config)
    db_conn.create_tables()
    db_conn.engine.dispose()

    client = TestClient(app)
    yield client
    # clean up test database file after tests
    if os.path.exists(test_config.database_path):
        os.remove(test_config.database_path)


@pytest.fixture(scope="class")
def token():
    """static token of a staff client"""
    return STAFF_TOKEN


@pytest.fixture(scope="class")
def member_token_factory(test_app: TestClient, token):
    """Get a signed token of any Member by id"""

    def f(member_id: int):
        r = test_app.post(
            "/tokens/member", json={"member_id": member_id}, headers={"x-token": token}
        )
        assert r.status_code == 200
        return r.json()["data"]["token"]

    return f


@pytest.fixture(scope="class")
def company_factory(test_app: TestClient, token):
    def f(name: str) -> int:
        r = test_app.post("/companies", json={"name": name}, headers={"x-token": token})
        assert r.status_code == 200
        return r.json()["data"]["id"]

    return f


@pytest.fixture(scope="class")
def member_factory(test_app: TestClient, token):
    def f(company_id: int | None = None, **fields) -> int:
        payload = {
            "first_name": "Jane",
            "last_name": "Doe",
            "date_of_birth": "1985-04-12",
            "company_id": company_id,
            "address": "1 Main St",
            **fields,
        }
        r = test_app.post("/members", json=payload, headers={"x-token": token})
        assert r.status_code == 200
        return r.json()["data"]["id"]

    return f


@pytest.fixture(scope="class")
def card_factory(test_app: TestClient, token):
    def f(member_id: int, card_type: str = "digital", **fields) -> list[dict]:
        r = test_app.post(
            "/cards/generate",
            json={"member_id": member_id, "card_type": card_type, **fields},
            headers={"x-token": token},
        )
        assert r.status_code == 200
        return r.json()["data"]

    return f


@pytest.fixture(scope="class")
def uow_runner(test_app: TestClient):
    """Run a callable against a ServiceContainer in its own committed unit of work"""
    def f(fn):
        config = app.dependency_overrides.get(get_config, get_config)()
        db_conn = DatabaseConnection(config=config)
        try:
            with UnitOfWork(db_conn.get_session()) as uow:
                return fn(ServiceContainer(uow, config))
        finally:
            db_conn.engine.dispose()

    return f
