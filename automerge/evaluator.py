"""Auto-merge eligibility evaluation and execution.

:func:`execute_auto_merge` is the single decision point. It takes a pull
request snapshot and either does nothing or merges through a
:class:`~automerge.providers.base.ProviderGateway` and posts a comment:

1. A pull request tagged ``on-approve`` needs at least one review, and every
   review must be approved.
2. There must be at least one build on the head commit, and all builds must
   have passed.
3. The pull request must be tagged with either trigger.
4. The provider must report the pull request as mergeable.

Every "no" is a normal outcome and is returned, not raised. Only provider
failures raise (:class:`~automerge.errors.ProviderError`). Nothing is
remembered between calls; merging twice is prevented by the provider
refusing to merge a merged pull request.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from automerge.comments import merge_commit_message, merged_comment
from automerge.config import DEFAULT_MARKERS, MarkerConfig
from automerge.credentials import Credentials
from automerge.errors import ProviderError
from automerge.models import BuildStatus, MergeStrategy, PullRequest, ReviewState
from automerge.providers.base import ProviderGateway
from automerge.strategy import select_merge_strategy
from automerge.tagging import is_approval_tagged, is_auto_merge_enabled

logger = logging.getLogger(__name__)


class MergeOutcome(Enum):
    """Possible outcomes of an evaluation."""

    SKIPPED = "skipped"
    NOT_MERGEABLE = "not_mergeable"
    MERGED = "merged"


@dataclass
class AutoMergeResult:
    """Result returned after evaluating a pull request."""

    outcome: MergeOutcome
    reason: str
    pr_number: int | None = None
    strategy: MergeStrategy | None = None

    @property
    def merged(self) -> bool:
        return self.outcome is MergeOutcome.MERGED


def approval_satisfied(pr: PullRequest) -> bool:
    """Return True if there is at least one review and all are approved."""
    return bool(pr.reviews) and all(r.state is ReviewState.APPROVED for r in pr.reviews)


def builds_ready(pr: PullRequest) -> bool:
    """Return True if there is at least one build and all have passed."""
    builds = pr.head.builds
    return bool(builds) and all(b.status is BuildStatus.PASSED for b in builds)


def ineligibility_reason(pr: PullRequest, markers: MarkerConfig) -> str | None:
    """Return why the pull request may not be merged, or None if it may."""
    if is_approval_tagged(pr, markers) and not approval_satisfied(pr):
        return "waiting for approved reviews"
    if not builds_ready(pr):
        return "waiting for successful checks"
    if not is_auto_merge_enabled(pr, markers):
        return "auto-merge not requested"
    return None


def resolve_api_base(
    pr: PullRequest, gateway: ProviderGateway, fallback: str | None = None
) -> str:
    """Return the API base for the pull request's provider, without trailing slash."""
    api_base = pr.repo.api_url or fallback or gateway.default_api_url
    if not api_base:
        raise ProviderError(f"No API URL known for {pr.repo.owner}/{pr.repo.name}.")
    return api_base.rstrip("/")


async def execute_auto_merge(
    pr: PullRequest | None,
    credentials: Credentials | None,
    gateway: ProviderGateway,
    markers: MarkerConfig = DEFAULT_MARKERS,
    api_url: str | None = None,
) -> AutoMergeResult:
    """Evaluate the pull request and merge it if every condition holds.

    ``api_url`` is used when the snapshot does not name its provider endpoint.
    """
    if pr is None:
        return AutoMergeResult(MergeOutcome.SKIPPED, "no pull request in event")

    reason = ineligibility_reason(pr, markers)
    if reason is not None:
        logger.debug("Not merging PR #%d: %s", pr.number, reason)
        return AutoMergeResult(MergeOutcome.SKIPPED, reason, pr.number)

    api_base = resolve_api_base(pr, gateway, api_url)

    if not await gateway.query_mergeability(credentials, api_base, pr):
        logger.info("PR #%d in %s/%s is not mergeable", pr.number, pr.repo.owner, pr.repo.name)
        return AutoMergeResult(
            MergeOutcome.NOT_MERGEABLE, "provider reports not mergeable", pr.number
        )

    strategy = select_merge_strategy(pr, markers)
    logger.info(
        "Merging PR #%d in %s/%s using %s",
        pr.number,
        pr.repo.owner,
        pr.repo.name,
        strategy.value,
    )
    await gateway.merge(credentials, api_base, pr, strategy, merge_commit_message(pr))
    await gateway.post_comment(credentials, api_base, pr, merged_comment(pr, markers))

    return AutoMergeResult(MergeOutcome.MERGED, "all conditions met", pr.number, strategy)
