"""Tests for the evaluator: eligibility rules and the merge/comment sequence."""

import logging

import pytest

from automerge.credentials import TokenCredentials
from automerge.errors import MergeConflictError, ProviderError
from automerge.evaluator import (
    MergeOutcome,
    approval_satisfied,
    builds_ready,
    execute_auto_merge,
    resolve_api_base,
)
from automerge.models import BuildStatus, MergeStrategy
from automerge.providers.base import ProviderGateway
from conftest import API_URL, approved, changes_requested, make_pr

CREDS = TokenCredentials("ghp_test")
PASSED = BuildStatus.PASSED


class FakeGateway(ProviderGateway):
    """Records calls instead of talking to a provider."""

    default_api_url = "https://fake.example"

    def __init__(self, mergeable: bool = True, merge_error: Exception | None = None) -> None:
        super().__init__()
        self.mergeable = mergeable
        self.merge_error = merge_error
        self.calls: list[tuple] = []

    async def query_mergeability(self, credentials, api_base, pr) -> bool:
        self.calls.append(("query", api_base, pr.number))
        return self.mergeable

    async def merge(self, credentials, api_base, pr, strategy, message) -> None:
        self.calls.append(("merge", strategy, message))
        if self.merge_error is not None:
            raise self.merge_error

    async def post_comment(self, credentials, api_base, pr, text) -> None:
        self.calls.append(("comment", text))

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


class TestPredicates:
    def test_approval_requires_reviews(self) -> None:
        assert approval_satisfied(make_pr()) is False

    def test_approval_requires_all_approved(self) -> None:
        assert approval_satisfied(make_pr(reviews=(approved(), changes_requested()))) is False

    def test_approval_satisfied(self) -> None:
        assert approval_satisfied(make_pr(reviews=(approved("a"), approved("b")))) is True

    def test_builds_required(self) -> None:
        assert builds_ready(make_pr()) is False

    @pytest.mark.parametrize("status", [BuildStatus.FAILED, BuildStatus.PENDING, BuildStatus.STARTED])
    def test_any_non_passed_build(self, status: BuildStatus) -> None:
        assert builds_ready(make_pr(builds=(PASSED, status))) is False

    def test_builds_ready(self) -> None:
        assert builds_ready(make_pr(builds=(PASSED, PASSED))) is True


# ---------------------------------------------------------------------------
# No-op outcomes
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_absent_pull_request_is_noop() -> None:
    gateway = FakeGateway()
    result = await execute_auto_merge(None, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_approval_tag_without_reviews_is_noop() -> None:
    gateway = FakeGateway()
    pr = make_pr(labels=("auto-merge:on-approve",), builds=(PASSED,))
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_approval_tag_with_unapproved_review_is_noop() -> None:
    gateway = FakeGateway()
    pr = make_pr(
        title="[auto-merge:on-approve] tidy",
        reviews=(approved(), changes_requested()),
        builds=(PASSED,),
    )
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert gateway.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "labels", [("auto-merge:on-approve",), ("auto-merge:on-check-success",), ()]
)
async def test_no_builds_is_noop_regardless_of_tags(labels: tuple[str, ...]) -> None:
    gateway = FakeGateway()
    pr = make_pr(labels=labels, reviews=(approved(),))
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_failed_build_is_noop() -> None:
    gateway = FakeGateway()
    pr = make_pr(
        labels=("auto-merge:on-check-success",), builds=(PASSED, BuildStatus.FAILED)
    )
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_untagged_is_noop() -> None:
    gateway = FakeGateway()
    pr = make_pr(reviews=(approved(),), builds=(PASSED,))
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.outcome is MergeOutcome.SKIPPED
    assert result.reason == "auto-merge not requested"
    assert gateway.calls == []


# ---------------------------------------------------------------------------
# Merges
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_approved_and_green_merges_then_comments() -> None:
    gateway = FakeGateway()
    pr = make_pr(labels=("auto-merge:on-approve",), reviews=(approved("alice"),), builds=(PASSED,))

    result = await execute_auto_merge(pr, CREDS, gateway)

    assert result.merged is True
    assert result.strategy is MergeStrategy.MERGE_COMMIT
    assert gateway.names() == ["query", "merge", "comment"]
    assert gateway.calls[1][1] is MergeStrategy.MERGE_COMMIT
    comment = gateway.calls[2][1]
    assert "1 successful check" in comment
    assert "1 approved review" in comment
    assert "@alice" in comment
    assert "[atomist:generated]" in comment
    assert "[auto-merge:on-approve]" in comment


@pytest.mark.asyncio
async def test_check_success_tag_skips_approval() -> None:
    gateway = FakeGateway()
    pr = make_pr(body="[auto-merge:on-check-success]", builds=(PASSED, PASSED))

    result = await execute_auto_merge(pr, CREDS, gateway)

    assert result.merged is True
    assert gateway.names() == ["query", "merge", "comment"]
    comment = gateway.calls[2][1]
    assert "2 successful checks" in comment
    assert "No reviews" in comment


@pytest.mark.asyncio
async def test_uses_strategy_label() -> None:
    gateway = FakeGateway()
    pr = make_pr(
        labels=("auto-merge:on-check-success", "auto-merge-method:squash"), builds=(PASSED,)
    )
    result = await execute_auto_merge(pr, CREDS, gateway)
    assert result.strategy is MergeStrategy.SQUASH
    assert gateway.calls[1][1] is MergeStrategy.SQUASH


@pytest.mark.asyncio
async def test_not_mergeable_is_logged_and_succeeds(caplog: pytest.LogCaptureFixture) -> None:
    gateway = FakeGateway(mergeable=False)
    pr = make_pr(labels=("auto-merge:on-check-success",), builds=(PASSED,))

    with caplog.at_level(logging.INFO, logger="automerge.evaluator"):
        result = await execute_auto_merge(pr, CREDS, gateway)

    assert result.outcome is MergeOutcome.NOT_MERGEABLE
    assert gateway.names() == ["query"]
    assert any("not mergeable" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_second_evaluation_after_merge_does_not_comment_again() -> None:
    pr = make_pr(labels=("auto-merge:on-approve",), reviews=(approved(),), builds=(PASSED,))
    gateway = FakeGateway()

    first = await execute_auto_merge(pr, CREDS, gateway)
    gateway.mergeable = False
    second = await execute_auto_merge(pr, CREDS, gateway)

    assert first.merged is True
    assert second.outcome is MergeOutcome.NOT_MERGEABLE
    assert gateway.names().count("comment") == 1
    assert gateway.names().count("merge") == 1


@pytest.mark.asyncio
async def test_merge_failure_propagates_without_comment() -> None:
    gateway = FakeGateway(merge_error=MergeConflictError("version is stale"))
    pr = make_pr(labels=("auto-merge:on-check-success",), builds=(PASSED,))

    with pytest.raises(ProviderError):
        await execute_auto_merge(pr, CREDS, gateway)

    assert gateway.names() == ["query", "merge"]


# ---------------------------------------------------------------------------
# API base resolution
# ---------------------------------------------------------------------------


class TestResolveApiBase:
    def test_prefers_pull_request_url(self) -> None:
        assert resolve_api_base(make_pr(), FakeGateway(), "https://other") == API_URL

    def test_falls_back_to_settings_then_gateway(self) -> None:
        pr = make_pr(api_url=None)
        assert resolve_api_base(pr, FakeGateway(), "https://ghe.local/api/v3/") == "https://ghe.local/api/v3"
        assert resolve_api_base(pr, FakeGateway()) == "https://fake.example"

    def test_raises_without_any_url(self) -> None:
        gateway = FakeGateway()
        gateway.default_api_url = None
        with pytest.raises(ProviderError):
            resolve_api_base(make_pr(api_url=None), gateway)
