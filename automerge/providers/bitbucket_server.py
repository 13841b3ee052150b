"""Bitbucket Server (Data Center) REST API gateway.

Merging is a read-then-write: the pull request's current ``version`` is read
first and sent with the merge request. If someone updates the pull request in
between, the server answers 409 and the resulting MergeConflictError is
propagated as-is.
"""

from automerge.credentials import Credentials
from automerge.errors import ProviderError
from automerge.models import MergeStrategy, PullRequest
from automerge.providers.base import ProviderGateway

_STRATEGY_IDS = {
    MergeStrategy.MERGE_COMMIT: "no-ff",
    MergeStrategy.FAST_FORWARD: "ff-only",
    MergeStrategy.SQUASH: "squash",
}


class BitbucketServerGateway(ProviderGateway):
    """Bitbucket Server REST 1.0. ``close_source_branch`` is ignored; the
    merge endpoint has no such option."""

    def _pr_url(self, api_base: str, pr: PullRequest) -> str:
        return (
            f"{api_base}/projects/{pr.repo.owner}/repos/{pr.repo.name}"
            f"/pull-requests/{pr.number}"
        )

    async def query_mergeability(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest
    ) -> bool:
        data = await self.request("GET", f"{self._pr_url(api_base, pr)}/merge", credentials)
        return bool(data.get("canMerge")) and not data.get("conflicted", False)

    async def current_version(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest
    ) -> int:
        data = await self.request("GET", self._pr_url(api_base, pr), credentials)
        version = data.get("version")
        if not isinstance(version, int):
            raise ProviderError(f"Pull request #{pr.number} has no version in its details.")
        return version

    async def merge(
        self,
        credentials: Credentials | None,
        api_base: str,
        pr: PullRequest,
        strategy: MergeStrategy,
        message: str,
    ) -> None:
        version = await self.current_version(credentials, api_base, pr)
        await self.request(
            "POST",
            f"{self._pr_url(api_base, pr)}/merge",
            credentials,
            params={"version": version},
            json={"strategyId": _STRATEGY_IDS[strategy], "message": message},
        )

    async def post_comment(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest, text: str
    ) -> None:
        await self.request(
            "POST", f"{self._pr_url(api_base, pr)}/comments", credentials, json={"text": text}
        )
