"""
Unit tests for GitLab webhook reconciliation
"""

import httpx
import pytest

from plugins.gitlab.config import GitLabSpaceInstallationConfiguration
from plugins.gitlab.events import GitLabIntegration, should_update_webhook
from plugins.gitlab.webhooks import get_webhook_token, verify_webhook_token
from runtime.errors import ConfigurationMissing
from runtime.events import InstallationSnapshot, parse_event

pytestmark = [pytest.mark.unit, pytest.mark.webhooks]

HOOKS_URL = "https://gitlab.com/api/v4/projects/42/hooks"
INSTALLATION_URL = "https://api.platform.test/v1/integrations/gitlab/installations/inst_gitlab/spaces/space_1"

BASE_CONFIG = {"project": "42", "auth_token": "glpat-token", "gitlab_host": None, "ref": "main"}

def config(**overrides):
    return GitLabSpaceInstallationConfiguration.model_validate({**BASE_CONFIG, **overrides})

def snapshot(status="active", **overrides):
    return InstallationSnapshot(status=status, configuration={**BASE_CONFIG, **overrides})

class TestShouldUpdateWebhook:
    """Test the decision to recreate a webhook"""

    def test_project_change(self):
        assert should_update_webhook(config(project="43"), snapshot()) is True

    def test_auth_token_change(self):
        assert should_update_webhook(config(auth_token="rotated"), snapshot()) is True

    def test_host_change(self):
        assert should_update_webhook(config(gitlab_host="https://gitlab.acme.test"), snapshot()) is True

    def test_identical_active_configuration(self):
        assert should_update_webhook(config(), snapshot()) is False

    def test_ref_change_alone_keeps_webhook(self):
        assert should_update_webhook(config(ref="release"), snapshot()) is False

    def test_leaving_pending_with_first_ref(self):
        assert should_update_webhook(config(), snapshot(status="pending", ref=None)) is True

    def test_pending_with_existing_ref(self):
        assert should_update_webhook(config(), snapshot(status="pending")) is False

    def test_numeric_project_id(self):
        assert should_update_webhook(config(project=42), snapshot()) is False

def setup_event(status="active", previous=None):
    payload = {
        "type": "space_installation_setup",
        "status": status,
        "installationId": "inst_gitlab",
        "spaceId": "space_1",
    }
    if previous is not None:
        payload["previous"] = previous
    return parse_event(payload)

class TestSpaceInstallationSetup:
    """Test the installation setup flow"""

    @pytest.mark.asyncio
    async def test_pending_installation_is_skipped(self, fake_http, make_context, gitlab_environment):
        plugin = GitLabIntegration(transport=fake_http.transport)

        result = await plugin.handle_event(setup_event(status="pending"), make_context(gitlab_environment))

        assert result is None
        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_paused_installation_is_skipped(self, fake_http, make_context, gitlab_environment):
        plugin = GitLabIntegration(transport=fake_http.transport)

        result = await plugin.handle_event(setup_event(status="paused"), make_context(gitlab_environment))

        assert result is None
        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_active_without_token(self, fake_http, make_context, gitlab_environment):
        del gitlab_environment["spaceInstallation"]["configuration"]["auth_token"]
        plugin = GitLabIntegration(transport=fake_http.transport)

        with pytest.raises(ConfigurationMissing):
            await plugin.handle_event(setup_event(), make_context(gitlab_environment))

        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_first_setup_installs_and_persists_hook(self, fake_http, make_context, gitlab_environment):
        fake_http.add("POST", HOOKS_URL, httpx.Response(201, json={"id": 7}))
        fake_http.add("PATCH", INSTALLATION_URL, httpx.Response(200, json={}))
        plugin = GitLabIntegration(transport=fake_http.transport)

        await plugin.handle_event(setup_event(), make_context(gitlab_environment))

        hook = fake_http.json_bodies("POST", HOOKS_URL)[0]
        assert hook["url"] == "https://integrations.platform.test/gitlab/webhook"
        assert hook["token"] == get_webhook_token("inst_gitlab", "space_1")
        assert hook["push_events"] is True
        assert fake_http.find("POST", HOOKS_URL)[0].headers["authorization"] == "Bearer glpat-token"

        patch = fake_http.json_bodies("PATCH", INSTALLATION_URL)[0]
        assert patch["configuration"]["hook_id"] == 7
        assert patch["configuration"]["project"] == "42"

    @pytest.mark.asyncio
    async def test_unchanged_configuration_is_left_alone(self, fake_http, make_context, gitlab_environment):
        previous = {"status": "active", "configuration": {**BASE_CONFIG, "hook_id": 7}}
        plugin = GitLabIntegration(transport=fake_http.transport)

        await plugin.handle_event(setup_event(previous=previous), make_context(gitlab_environment))

        assert fake_http.requests == []

    @pytest.mark.asyncio
    async def test_project_change_replaces_hook(self, fake_http, make_context, gitlab_environment):
        previous = {
            "status": "active",
            "configuration": {
                "project": "41",
                "auth_token": "old-token",
                "gitlab_host": "https://gitlab.old.test",
                "hook_id": 5,
            },
        }
        fake_http.add("DELETE", "https://gitlab.old.test/api/v4/projects/41/hooks/5", httpx.Response(204))
        fake_http.add("POST", HOOKS_URL, httpx.Response(201, json={"id": 8}))
        fake_http.add("PATCH", INSTALLATION_URL, httpx.Response(200, json={}))
        plugin = GitLabIntegration(transport=fake_http.transport)

        await plugin.handle_event(setup_event(previous=previous), make_context(gitlab_environment))

        methods = [request.method for request in fake_http.requests]
        assert methods == ["DELETE", "POST", "PATCH"]
        delete = fake_http.requests[0]
        assert delete.headers["authorization"] == "Bearer old-token"
        assert fake_http.json_bodies("PATCH", INSTALLATION_URL)[0]["configuration"]["hook_id"] == 8

    @pytest.mark.asyncio
    async def test_already_deleted_hook_is_tolerated(self, fake_http, make_context, gitlab_environment):
        previous = {"status": "active", "configuration": {**BASE_CONFIG, "auth_token": "old", "hook_id": 5}}
        fake_http.add("POST", HOOKS_URL, httpx.Response(201, json={"id": 9}))
        fake_http.add("PATCH", INSTALLATION_URL, httpx.Response(200, json={}))
        plugin = GitLabIntegration(transport=fake_http.transport)

        await plugin.handle_event(setup_event(previous=previous), make_context(gitlab_environment))

        assert fake_http.json_bodies("PATCH", INSTALLATION_URL)[0]["configuration"]["hook_id"] == 9

    @pytest.mark.asyncio
    async def test_previous_hook_without_credentials_is_left_behind(self, fake_http, make_context, gitlab_environment):
        previous = {"status": "active", "configuration": {"hook_id": 5, "ref": "main"}}
        fake_http.add("POST", HOOKS_URL, httpx.Response(201, json={"id": 10}))
        fake_http.add("PATCH", INSTALLATION_URL, httpx.Response(200, json={}))
        plugin = GitLabIntegration(transport=fake_http.transport)

        await plugin.handle_event(setup_event(previous=previous), make_context(gitlab_environment))

        methods = [request.method for request in fake_http.requests]
        assert methods == ["POST", "PATCH"]
        assert fake_http.json_bodies("PATCH", INSTALLATION_URL)[0]["configuration"]["hook_id"] == 10

def test_webhook_token_verification():
    token = get_webhook_token("inst_gitlab", "space_1")

    assert verify_webhook_token(token, "inst_gitlab", "space_1") is True
    assert verify_webhook_token(token, "inst_gitlab", "space_2") is False
    assert verify_webhook_token(None, "inst_gitlab", "space_1") is False
    assert verify_webhook_token("caf\u00e9", "inst_gitlab", "space_1") is False
