"""
Shared pytest fixtures and configuration
"""

import json
import pytest
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add the project root to Python path to make imports work
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables
os.environ["PLATFORM_API_URL"] = "https://api.platform.test/v1"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SLACK_SIGNING_SECRET"] = "test-slack-signing-secret"
os.environ["PLUGINS_AUTO_DISCOVER"] = "true"

PLATFORM_API = "https://api.platform.test/v1"

RouteResponse = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeHTTP:
    """
    Routes outbound httpx requests to canned responses and records them.

    Routes are keyed by method and URL without the query string. Requests
    without a route are answered with a 404.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], RouteResponse] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, response: RouteResponse) -> "FakeHTTP":
        self.routes[(method.upper(), url)] = response
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        route = self.routes.get((request.method, url))
        if route is None:
            return httpx.Response(404, json={"error": f"no route for {request.method} {url}"})
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def find(self, method: str, url: str) -> List[httpx.Request]:
        return [
            request for request in self.requests
            if request.method == method.upper()
            and f"{request.url.scheme}://{request.url.host}{request.url.path}" == url
        ]

    def json_bodies(self, method: str, url: str) -> List[Any]:
        return [json.loads(request.content) for request in self.find(method, url)]


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP()


@pytest.fixture
def make_context(fake_http):
    """Build a RuntimeContext whose host API calls go to fake_http."""
    from runtime.context import build_runtime_context

    def _make_context(environment: Dict[str, Any]):
        return build_runtime_context(environment, transport=fake_http.transport)

    return _make_context


@pytest.fixture(scope="function")
def app(fake_http) -> FastAPI:
    """
    The application with host API calls routed to fake_http.
    """
    from main import app as main_app
    from runtime.context import build_runtime_context, get_context_factory

    main_app.dependency_overrides[get_context_factory] = lambda: (
        lambda environment: build_runtime_context(environment, transport=fake_http.transport)
    )
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def environment_headers():
    """Build the headers carrying a runtime environment on a forwarded fetch request."""

    def _environment_headers(environment: Dict[str, Any]) -> Dict[str, str]:
        return {"X-Runtime-Environment": json.dumps(environment)}

    return _environment_headers


@pytest.fixture
def okta_environment() -> Dict[str, Any]:
    return {
        "integration": {"name": "okta"},
        "installation": {
            "id": "inst_okta",
            "target": {"organization": "org_1"},
        },
        "siteInstallation": {
            "installation": "inst_okta",
            "site": "site_1",
            "configuration": {
                "client_id": "okta-client-id",
                "client_secret": "okta-client-secret",
                "okta_domain": "dev-123.okta.com",
            },
            "urls": {"publicEndpoint": "https://integrations.platform.test/okta"},
        },
        "signingSecrets": {"siteInstallation": "site-signing-secret"},
        "apiTokens": {"installation": "installation-token"},
    }


@pytest.fixture
def gitlab_environment() -> Dict[str, Any]:
    return {
        "integration": {"name": "gitlab"},
        "installation": {
            "id": "inst_gitlab",
            "target": {"organization": "org_1"},
        },
        "spaceInstallation": {
            "installation": "inst_gitlab",
            "space": "space_1",
            "configuration": {
                "project": "42",
                "project_name": "acme/docs",
                "auth_token": "glpat-token",
                "ref": "main",
            },
            "urls": {"publicEndpoint": "https://integrations.platform.test/gitlab"},
        },
        "apiTokens": {"installation": "installation-token"},
    }


@pytest.fixture
def slack_environment() -> Dict[str, Any]:
    return {
        "integration": {"name": "slack"},
        "apiTokens": {"integration": "integration-token"},
    }


@pytest.fixture
def mock_okta_plugin(monkeypatch, fake_http):
    """
    Make the plugin manager create Okta plugins whose calls to Okta go to fake_http.
    """
    from plugin_manager import plugin_manager
    from plugins.okta.auth import OktaVisitorAuthPlugin

    original_create_integration_plugin = plugin_manager.create_integration_plugin

    def mock_create_integration_plugin(service_name, **kwargs):
        if service_name == "okta":
            return OktaVisitorAuthPlugin(transport=fake_http.transport)
        return original_create_integration_plugin(service_name, **kwargs)

    monkeypatch.setattr(plugin_manager, "create_integration_plugin", mock_create_integration_plugin)


@pytest.fixture
def mock_gitlab_plugin(monkeypatch, fake_http):
    """
    Make the plugin manager create GitLab plugins whose calls to GitLab go to fake_http.
    """
    from plugin_manager import plugin_manager
    from plugins.gitlab.events import GitLabIntegration

    original_create_integration_plugin = plugin_manager.create_integration_plugin

    def mock_create_integration_plugin(service_name, **kwargs):
        if service_name == "gitlab":
            return GitLabIntegration(transport=fake_http.transport)
        return original_create_integration_plugin(service_name, **kwargs)

    monkeypatch.setattr(plugin_manager, "create_integration_plugin", mock_create_integration_plugin)
