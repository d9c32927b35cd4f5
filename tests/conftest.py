"""Shared test configuration."""

import os

# Never talk to the real School API from tests
os.environ.setdefault("SCHOOLS_API_URL", "http://schools-api.internal")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest

from school_directory import create_app
from school_directory.services.school_api import FetchError
from tests.fakes import FakeSchoolApi, FakeTimer, TestingConfig, make_school


@pytest.fixture
def fake_api():
    return FakeSchoolApi(schools=[
        make_school(),
        make_school(id=2, name="Blue Ridge", address="400 Summit Road, Hill Town",
                    city="Dallas", image="uploads/blue-ridge.jpg"),
    ])


@pytest.fixture
def app(fake_api):
    app = create_app(TestingConfig)
    app.extensions["school_api"] = fake_api
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def failing_fetch(fake_api):
    fake_api.fetch_error = FetchError("Failed to fetch schools")
    return fake_api


@pytest.fixture(autouse=True)
def reset_fake_timers():
    FakeTimer.instances = []
    yield
    FakeTimer.instances = []
