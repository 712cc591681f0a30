"""
Shared fixtures for the FU News tests.

No backend is needed: services get a FakeClient, routes get patched
services or a fake requests session.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from funews import FUNews
from funews.core.config import Config
from funews.core.errors import ApiError
from funews.core.models import AccountRole


class FakeClient:
    """Stands in for ApiClient. Responses and errors are keyed by (method, endpoint)."""

    def __init__(self, responses=None, errors=None):
        self.responses = dict(responses or {})
        self.errors = dict(errors or {})
        self.calls = []
        self.token = None

    def _call(self, method, endpoint, data=None, params=None):
        self.calls.append((method, endpoint, data, params))
        error = self.errors.get((method, endpoint))
        if error is not None:
            raise error
        return self.responses.get((method, endpoint))

    def get(self, endpoint, params=None):
        return self._call('GET', endpoint, params=params)

    def post(self, endpoint, data=None):
        return self._call('POST', endpoint, data=data)

    def put(self, endpoint, data=None):
        return self._call('PUT', endpoint, data=data)

    def patch(self, endpoint, data=None):
        return self._call('PATCH', endpoint, data=data)

    def delete(self, endpoint):
        return self._call('DELETE', endpoint)

    def set_token(self, token):
        self.token = token

    def called(self, method, endpoint):
        return [c for c in self.calls if c[0] == method and c[1] == endpoint]


def api_error(status, message='boom'):
    return ApiError(message, status)


@pytest.fixture
def tmp_db_dir():
    """Temporary directory for the log database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="funews-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_log_db(tmp_db_dir, monkeypatch):
    """Log writes outside an app context land in the temp dir too."""
    monkeypatch.setattr(Config, 'LOG_DB', os.path.join(tmp_db_dir, 'app_logs.db'))


def make_app(tmp_db_dir, config=None):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["LOG_DB"] = os.path.join(tmp_db_dir, "logs", "app_logs.db")
    app.config["API_BASE_URL"] = "http://backend.test"
    FUNews(app, config)
    return app


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every FU News module registered."""
    return make_app(tmp_db_dir)


@pytest.fixture
def client(app):
    return app.test_client()


def sign_in(client, role=AccountRole.Admin, account_id=1, name='Test User'):
    """Put a signed-in account straight into the session."""
    with client.session_transaction() as sess:
        sess['access_token'] = 'access-token'
        sess['refresh_token'] = 'refresh-token'
        sess['account_id'] = account_id
        sess['account_name'] = name
        sess['account_email'] = 'user@funews.test'
        sess['account_role'] = int(role)


@pytest.fixture
def admin_client(client):
    sign_in(client, AccountRole.Admin)
    return client


@pytest.fixture
def staff_client(client):
    sign_in(client, AccountRole.Staff, account_id=2, name='Staff User')
    return client


@pytest.fixture
def lecturer_client(client):
    sign_in(client, AccountRole.Lecturer, account_id=3, name='Lecturer User')
    return client
