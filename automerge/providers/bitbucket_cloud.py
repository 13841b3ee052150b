"""Bitbucket Cloud (api.bitbucket.org 2.0) gateway."""

from automerge.credentials import Credentials
from automerge.models import MergeStrategy, PullRequest
from automerge.providers.base import ProviderGateway

BITBUCKET_CLOUD_API_BASE = "https://api.bitbucket.org/2.0"

_MERGE_STRATEGIES = {
    MergeStrategy.MERGE_COMMIT: "merge_commit",
    MergeStrategy.FAST_FORWARD: "fast_forward",
    MergeStrategy.SQUASH: "squash",
}


class BitbucketCloudGateway(ProviderGateway):
    """Merges through api.bitbucket.org, deleting the source branch when
    ``close_source_branch`` is set."""

    default_api_url = BITBUCKET_CLOUD_API_BASE

    def _pr_url(self, api_base: str, pr: PullRequest) -> str:
        return f"{api_base}/repositories/{pr.repo.owner}/{pr.repo.name}/pullrequests/{pr.number}"

    async def query_mergeability(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest
    ) -> bool:
        # Bitbucket Cloud exposes no conflict flag; an open PR is worth a try
        data = await self.request("GET", self._pr_url(api_base, pr), credentials)
        return data.get("state") == "OPEN"

    async def merge(
        self,
        credentials: Credentials | None,
        api_base: str,
        pr: PullRequest,
        strategy: MergeStrategy,
        message: str,
    ) -> None:
        await self.request(
            "POST",
            f"{self._pr_url(api_base, pr)}/merge",
            credentials,
            json={
                "type": "pullrequest",
                "merge_strategy": _MERGE_STRATEGIES[strategy],
                "message": message,
                "close_source_branch": self.close_source_branch,
            },
        )

    async def post_comment(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest, text: str
    ) -> None:
        await self.request(
            "POST",
            f"{self._pr_url(api_base, pr)}/comments",
            credentials,
            json={"content": {"raw": text, "markup": "markdown"}},
        )
