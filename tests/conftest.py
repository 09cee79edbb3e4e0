from asyncio import run

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.db import mongo
from app.main import app


@pytest.fixture
def db():
    client = AsyncMongoMockClient()
    database = client["billhabit_test"]
    mongo.use_database(database, client)
    yield database
    mongo.use_database(None)


@pytest.fixture
def client(db):
    # No `with` block: the lifespan would connect to a real MongoDB
    return TestClient(app)


@pytest.fixture
def login(db):
    """
    Factory: runs the OTP flow for a number and returns a TestClient that
    carries the session cookie. The account id is set as `client.account_id`.
    """
    def _login(number="9876543210", name=None):
        session = TestClient(app)
        response = session.post("/api/user/send-otp", json={"number": number})
        assert response.status_code == 200

        otp = run(db.users.find_one({"number": number}))["otp"]
        response = session.post("/api/user/verify-otp", json={"number": number, "otp": otp})
        assert response.status_code == 200

        session.account_id = response.json()["user"]["_id"]
        if name:
            response = session.post("/api/user/update-details", json={"name": name, "pin": "1234"})
            assert response.status_code == 200
        return session

    return _login
