import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.security import TokenCodec
from main import create_app

SECRET = "test-secret-key"


@pytest.fixture
def codec():
    return TokenCodec(SECRET)


def make_client(environment: str = "development") -> TestClient:
    app = create_app(Settings(referrer_secret=SECRET, environment=environment))
    return TestClient(app)


@pytest.fixture
def client():
    with make_client() as c:
        yield c


@pytest.fixture
def production_client():
    with make_client("production") as c:
        yield c
