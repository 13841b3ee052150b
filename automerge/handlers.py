"""Event handlers: one per inbound event kind, all ending in the evaluator."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from automerge.adapters import (
    pull_request_from_build_event,
    pull_request_from_pull_request_event,
    pull_request_from_review_event,
)
from automerge.config import Settings
from automerge.evaluator import AutoMergeResult, execute_auto_merge
from automerge.models import PullRequest
from automerge.providers.registry import get_gateway

logger = logging.getLogger(__name__)

Adapter = Callable[[dict[str, Any]], PullRequest | None]
Handler = Callable[[dict[str, Any], Settings], Awaitable[AutoMergeResult]]


async def _handle(
    event: str, adapter: Adapter, payload: dict[str, Any], settings: Settings
) -> AutoMergeResult:
    pr = adapter(payload)
    if pr is not None:
        logger.debug(
            "Evaluating PR #%d in %s/%s on %s event", pr.number, pr.repo.owner, pr.repo.name, event
        )
    return await execute_auto_merge(
        pr,
        settings.credentials(),
        get_gateway(
            settings.provider,
            timeout=settings.http_timeout,
            close_source_branch=settings.close_source_branch,
        ),
        markers=settings.markers(),
        api_url=settings.api_url,
    )


async def on_build(payload: dict[str, Any], settings: Settings) -> AutoMergeResult:
    """Re-evaluate a pull request after one of its builds changed status."""
    return await _handle("build", pull_request_from_build_event, payload, settings)


async def on_review(payload: dict[str, Any], settings: Settings) -> AutoMergeResult:
    """Re-evaluate a pull request after a review was submitted."""
    return await _handle("review", pull_request_from_review_event, payload, settings)


async def on_pull_request(payload: dict[str, Any], settings: Settings) -> AutoMergeResult:
    """Re-evaluate a pull request after it was opened or updated."""
    return await _handle("pull-request", pull_request_from_pull_request_event, payload, settings)


EVENT_HANDLERS: dict[str, Handler] = {
    "build": on_build,
    "review": on_review,
    "pull-request": on_pull_request,
}
