"""
Integration tests for GitLab webhook deliveries
"""

import httpx
import pytest

from plugins.gitlab.webhooks import get_webhook_token

pytestmark = [pytest.mark.integration, pytest.mark.webhooks]

IMPORT_URL = "https://api.platform.test/v1/spaces/space_1/git/import"

PUSH = {
    "object_kind": "push",
    "ref": "refs/heads/main",
    "project": {"git_http_url": "https://gitlab.com/acme/docs.git"},
    "commits": [{"message": "Update guide"}],
}

class TestGitLabWebhookRoute:
    """Test POST /gitlab/webhook"""

    def test_wrong_token(self, client, fake_http, gitlab_environment, environment_headers):
        response = client.post(
            "/gitlab/webhook",
            json=PUSH,
            headers={
                **environment_headers(gitlab_environment),
                "X-Gitlab-Token": "wrong",
                "X-Gitlab-Event": "Push Hook",
            }
        )

        assert response.status_code == 401
        assert fake_http.requests == []

    def test_non_ascii_token(self, client, fake_http, gitlab_environment, environment_headers):
        response = client.post(
            "/gitlab/webhook",
            json=PUSH,
            headers={
                **environment_headers(gitlab_environment),
                "X-Gitlab-Token": "caf\u00e9".encode("latin-1"),
                "X-Gitlab-Event": "Push Hook",
            }
        )

        assert response.status_code == 401
        assert fake_http.requests == []

    def test_push_to_configured_ref_imports(self, client, fake_http, gitlab_environment, environment_headers):
        fake_http.add("POST", IMPORT_URL, httpx.Response(200, json={}))

        response = client.post(
            "/gitlab/webhook",
            json=PUSH,
            headers={
                **environment_headers(gitlab_environment),
                "X-Gitlab-Token": get_webhook_token("inst_gitlab", "space_1"),
                "X-Gitlab-Event": "Push Hook",
            }
        )

        assert response.status_code == 200
        assert response.json() == {"status": "accepted"}
        body = fake_http.json_bodies("POST", IMPORT_URL)[0]
        assert body["ref"] == "refs/heads/main"
        assert body["commitMessage"] == "Update guide"

    def test_other_events_are_ignored(self, client, fake_http, gitlab_environment, environment_headers):
        response = client.post(
            "/gitlab/webhook",
            json={"object_kind": "merge_request"},
            headers={
                **environment_headers(gitlab_environment),
                "X-Gitlab-Token": get_webhook_token("inst_gitlab", "space_1"),
                "X-Gitlab-Event": "Merge Request Hook",
            }
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ignored"}
        assert fake_http.requests == []
