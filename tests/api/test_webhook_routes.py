"""
API tests for the GitHub webhook endpoint

The orchestrator is replaced with an AsyncMock through FastAPI dependency
overrides; the application lifespan is not run.
"""

import hashlib
import hmac
import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from devonboard.api.dependencies import get_app_settings, get_orchestrator
from devonboard.main import app
from devonboard.models.api_responses import (
    SubscriberOutcome,
    SubscriberSyncResult,
    SyncReport,
)
from devonboard.services.sync_orchestrator import ContentUnavailableError
from helpers import REPO_URL

WEBHOOK_URL = "/api/webhook/github"


def push_payload(commits):
    return {
        "ref": "refs/heads/main",
        "repository": {"full_name": "acme/platform", "html_url": REPO_URL},
        "commits": commits,
    }


def report_for(repository_address, file_path, revision_id, matched=1):
    return SyncReport(
        repository_address=repository_address,
        file_path=file_path,
        revision_id=revision_id,
        subscribers_matched=matched,
        results=[
            SubscriberSyncResult(
                source_id="src-1",
                plan_id="plan-1",
                outcome=SubscriberOutcome.AUTO_APPLIED,
                change_record_id="rec-1",
                severity=3,
                steps_updated=["step-1"],
            )
        ]
        if matched
        else [],
    )


@pytest.fixture
def orchestrator():
    mock = AsyncMock()
    mock.sync_change.side_effect = report_for
    return mock


@pytest.fixture
def client(orchestrator, settings):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_app_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def post_event(client, event, payload, headers=None):
    return client.post(
        WEBHOOK_URL,
        content=json.dumps(payload).encode("utf-8"),
        headers={
            "Content-Type": "application/json",
            "X-GitHub-Event": event,
            **(headers or {}),
        },
    )


def test_ping(client, orchestrator):
    response = post_event(client, "ping", {"zen": "Design for failure."})

    assert response.status_code == 200
    assert response.json()["message"] == "Pong! Webhook is working."
    orchestrator.sync_change.assert_not_called()


def test_other_events_are_ignored(client, orchestrator):
    response = post_event(client, "issues", {"action": "opened"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "not processed" in response.json()["message"]
    orchestrator.sync_change.assert_not_called()


def test_push_syncs_documentation_files_only(client, orchestrator):
    payload = push_payload(
        [
            {
                "id": "abc1234567",
                "added": [],
                "modified": ["README.md", "src/index.ts"],
                "removed": ["docs/legacy.md"],
            },
            {"id": "def7654321", "added": ["docs/setup.md"], "modified": [], "removed": []},
        ]
    )

    response = post_event(client, "push", payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Webhook processed successfully"
    assert [f["file_path"] for f in body["files"]] == ["README.md", "docs/setup.md"]
    assert body["files"][0]["status"] == "success"
    assert body["files"][0]["steps_updated"] == 1

    calls = [c.args for c in orchestrator.sync_change.await_args_list]
    assert calls == [
        (REPO_URL, "README.md", "abc1234567"),
        (REPO_URL, "docs/setup.md", "def7654321"),
    ]


def test_push_without_documentation_changes(client, orchestrator):
    payload = push_payload(
        [{"id": "abc1234567", "added": ["src/app.ts"], "modified": [], "removed": []}]
    )

    response = post_event(client, "push", payload)

    assert response.json()["message"] == "No documentation files changed"
    orchestrator.sync_change.assert_not_called()


def test_push_without_repository_url(client, orchestrator):
    response = post_event(
        client,
        "push",
        {"commits": [{"id": "abc", "modified": ["README.md"]}]},
    )

    assert response.status_code == 200
    assert response.json()["success"] is False
    orchestrator.sync_change.assert_not_called()


def test_failing_file_does_not_stop_others(client, orchestrator):
    def sync_change(repository_address, file_path, revision_id):
        if file_path == "README.md":
            raise ContentUnavailableError("README.md does not exist at abc1234567")
        if file_path == "docs/faq.md":
            raise RuntimeError("unexpected")
        return report_for(repository_address, file_path, revision_id, matched=0)

    orchestrator.sync_change.side_effect = sync_change
    payload = push_payload(
        [
            {
                "id": "abc1234567",
                "modified": ["README.md", "docs/faq.md", "docs/setup.md"],
            }
        ]
    )

    response = post_event(client, "push", payload)

    assert response.status_code == 200
    files = {f["file_path"]: f for f in response.json()["files"]}
    assert files["README.md"]["status"] == "error"
    assert "does not exist" in files["README.md"]["reason"]
    assert files["docs/faq.md"]["status"] == "error"
    assert files["docs/setup.md"]["status"] == "skipped"
    assert files["docs/setup.md"]["reason"] == "Repository not tracked"


def test_invalid_push_payload(client):
    response = client.post(
        WEBHOOK_URL,
        content=b"not json",
        headers={"X-GitHub-Event": "push"},
    )

    assert response.status_code == 400


def test_signature_required_when_secret_configured(client, orchestrator, settings):
    settings.github_webhook_secret = "s3cret"
    payload = push_payload([{"id": "abc1234567", "modified": ["README.md"]}])
    body = json.dumps(payload).encode("utf-8")
    good = "sha256=" + hmac.new(b"s3cret", body, hashlib.sha256).hexdigest()

    rejected = client.post(
        WEBHOOK_URL,
        content=body,
        headers={"X-GitHub-Event": "push", "X-Hub-Signature-256": "sha256=bad"},
    )
    missing = client.post(WEBHOOK_URL, content=body, headers={"X-GitHub-Event": "push"})
    accepted = client.post(
        WEBHOOK_URL,
        content=body,
        headers={"X-GitHub-Event": "push", "X-Hub-Signature-256": good},
    )

    assert rejected.status_code == 401
    assert missing.status_code == 401
    assert accepted.status_code == 200
    assert orchestrator.sync_change.await_count == 1


def test_webhook_status(client):
    response = client.get(WEBHOOK_URL)

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_root_and_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["endpoints"]["webhook"] == WEBHOOK_URL


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
