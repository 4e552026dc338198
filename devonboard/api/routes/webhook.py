"""
GitHub Webhook Routes

Receives GitHub webhook events and triggers a sync for every documentation
file changed by a push.

Setup:
1. In GitHub repo -> Settings -> Webhooks -> Add webhook
2. Payload URL: https://your-domain.com/api/webhook/github
3. Content type: application/json
4. Secret: same value as GITHUB_WEBHOOK_SECRET
5. Events: Just the push event
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import ValidationError

from devonboard.api.dependencies import get_app_settings, get_orchestrator
from devonboard.config import Settings
from devonboard.integrations.github import PushEvent, verify_signature
from devonboard.models.api_responses import FileSyncStatus, WebhookResponse
from devonboard.services.sync_orchestrator import (
    ContentUnavailableError,
    SyncOrchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/github", response_model=WebhookResponse)
async def github_webhook(
    request: Request,
    x_github_event: Optional[str] = Header(None),
    x_hub_signature_256: Optional[str] = Header(None),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_app_settings),
):
    """
    Handle GitHub webhook events.

    - ping: confirms the webhook is configured
    - push: syncs each changed documentation file (removed files are skipped)
    - anything else: acknowledged and ignored
    """
    payload = await request.body()

    if settings.github_webhook_secret and not verify_signature(
        payload, x_hub_signature_256, settings.github_webhook_secret
    ):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    logger.info(f"Received GitHub event: {x_github_event}")

    if x_github_event == "ping":
        return WebhookResponse(success=True, message="Pong! Webhook is working.")

    if x_github_event != "push":
        logger.info(f"Ignoring event type: {x_github_event}")
        return WebhookResponse(
            success=True,
            message=f"Event {x_github_event} received but not processed",
        )

    try:
        event = PushEvent.model_validate(json.loads(payload or b"{}"))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Invalid push payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid push event payload")

    return await handle_push_event(event, orchestrator)


async def handle_push_event(
    event: PushEvent, orchestrator: SyncOrchestrator
) -> WebhookResponse:
    """
    Sync every documentation file changed by a push.

    A failing file is reported and does not stop the remaining files.
    """
    repo_url = event.repository_url
    logger.info(
        f"Push to {repo_url} ({event.ref}): {len(event.commits)} commit(s)"
    )

    if not repo_url:
        logger.warning("No repository URL in payload")
        return WebhookResponse(success=False, message="No repository URL in payload")

    doc_changes = event.documentation_changes()
    if not doc_changes:
        logger.info("No documentation files changed, skipping")
        return WebhookResponse(
            success=True, message="No documentation files changed"
        )

    files = []
    for commit_id, file_path in doc_changes:
        logger.info(f"Triggering sync for {file_path} ({commit_id[:7]})")
        try:
            report = await orchestrator.sync_change(repo_url, file_path, commit_id)
            files.append(
                FileSyncStatus(
                    file_path=file_path,
                    revision_id=commit_id,
                    status="success" if report.subscribers_matched else "skipped",
                    records_written=report.records_written,
                    steps_updated=report.steps_updated,
                    pending_review=report.pending_review,
                    reason=None if report.subscribers_matched else "Repository not tracked",
                )
            )
        except ContentUnavailableError as e:
            logger.error(f"Could not fetch {file_path}: {e}")
            files.append(
                FileSyncStatus(
                    file_path=file_path,
                    revision_id=commit_id,
                    status="error",
                    reason=str(e),
                )
            )
        except Exception as e:
            logger.error(f"Failed to sync {file_path}: {e}", exc_info=True)
            files.append(
                FileSyncStatus(
                    file_path=file_path,
                    revision_id=commit_id,
                    status="error",
                    reason=str(e),
                )
            )

    return WebhookResponse(
        success=True, message="Webhook processed successfully", files=files
    )


@router.get("/github")
async def webhook_status():
    """Readiness check for the webhook endpoint."""
    return {
        "status": "ok",
        "message": "GitHub webhook endpoint is ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "events": ["push", "ping"],
    }
