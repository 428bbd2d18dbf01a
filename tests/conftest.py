"""
Test configuration and fixtures for the FastAPI URL resolver.
This centralizes all test setup, making individual tests clean.

No test touches the network: the resolver gets a FakeSession whose
responses are scripted per URL.
"""

import pytest
import requests
from fastapi.testclient import TestClient
from requests.structures import CaseInsensitiveDict

from main import app
from resolver_app.dependencies import get_resolver, get_store
from resolver_app.services.redirect_resolver import RedirectResolver
from resolver_app.storage.strategies import InMemoryResolutionStore, SQLResolutionStore


class FakeResponse:
    """Just enough of requests.Response for the resolver"""

    def __init__(self, status_code: int, location: str = None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict()
        if location is not None:
            self.headers["Location"] = location
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """
    Scripted stand-in for requests.Session.

    - redirect(url, location, status): url answers with a 3xx
    - respond(url, status): url answers with a fixed status
    - fail(url, method=None, error=None): url raises error, ConnectionError by
      default (for one method or both)
    Unscripted URLs answer 200.
    """

    def __init__(self):
        self.routes = {}
        self.failures = {}
        self.calls = []
        self.opened = 0
        self.closed = 0

    def __enter__(self):
        self.opened += 1
        return self

    def __exit__(self, *exc_info):
        self.closed += 1

    def redirect(self, url: str, location: str, status: int = 302):
        self.routes[url] = (status, location)

    def respond(self, url: str, status: int, location: str = None):
        self.routes[url] = (status, location)

    def fail(self, url: str, method: str = None, error: Exception = None):
        methods = [method] if method else ["HEAD", "GET"]
        for m in methods:
            self.failures[(m, url)] = error or requests.ConnectionError(f"Connection refused: {url}")

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if (method, url) in self.failures:
            raise self.failures[(method, url)]
        status, location = self.routes.get(url, (200, None))
        return FakeResponse(status, location)

    @property
    def requested_urls(self):
        return [call["url"] for call in self.calls]


@pytest.fixture(scope="function")
def fake_session():
    """Fresh scripted transport for each test"""
    return FakeSession()


@pytest.fixture(scope="function")
def resolver(fake_session):
    return RedirectResolver(session_factory=lambda: fake_session, timeout=5, max_hops=10)


@pytest.fixture(scope="function")
def store():
    """Fresh in-memory store for each test"""
    return InMemoryResolutionStore()


@pytest.fixture(scope="function")
def sql_store(tmp_path):
    """SQL store on a throwaway SQLite file"""
    sql = SQLResolutionStore(database_url=f"sqlite:///{tmp_path / 'test.db'}")
    try:
        yield sql
    finally:
        sql.engine.dispose()


@pytest.fixture(scope="function")
def client(store, resolver):
    """
    Create a test client with store and resolver dependencies overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_resolver] = lambda: resolver

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
