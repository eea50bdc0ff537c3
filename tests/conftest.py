"""Pytest configuration and fixtures"""
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from api import create_app
from models.user import User
from utils.security import hash_password

ALICE_PASSWORD = "secret1"


@pytest.fixture(scope="function")
def app() -> Generator[Flask, None, None]:
    """Fresh app over its own in-memory SQLite database for each test"""
    app = create_app("testing")
    yield app
    app.extensions["storage"].close()


@pytest.fixture(scope="function")
def client(app: Flask) -> FlaskClient:
    """Test client that does not replay cookies; tests send tokens explicitly"""
    return app.test_client(use_cookies=False)


@pytest.fixture
def auth(app: Flask):
    """The token core wired by create_app: config, repository, session_store, protocol"""
    return app.extensions["auth"]


@pytest.fixture
def auth_config(auth):
    return auth.config


@pytest.fixture
def repository(auth):
    return auth.repository


@pytest.fixture
def alice(repository) -> User:
    """Registered user alice with password 'secret1'"""
    user = User(
        username="alice",
        email="alice@example.com",
        full_name="Alice Liddell",
        password_hash=hash_password(ALICE_PASSWORD),
    )
    return repository.add(user)


@pytest.fixture
def stored_token(repository):
    """Read a user's refresh token straight from the row, bypassing the identity map"""
    def _read(user_id: str):
        repository.session.expire_all()
        return repository.find_by_id(user_id).refresh_token
    return _read
