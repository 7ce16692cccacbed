import pytest
from flask.testing import FlaskClient

from backend.app import create_app
from backend.config import TestingConfig


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app(TestingConfig)
    with app.test_client() as test_client:
        yield test_client
