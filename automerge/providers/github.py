"""GitHub REST API gateway."""

from automerge.credentials import Credentials
from automerge.models import MergeStrategy, PullRequest
from automerge.providers.base import ProviderGateway

GITHUB_API_BASE = "https://api.github.com"

_MERGE_METHODS = {
    MergeStrategy.MERGE_COMMIT: "merge",
    MergeStrategy.FAST_FORWARD: "rebase",
    MergeStrategy.SQUASH: "squash",
}


class GitHubGateway(ProviderGateway):
    """GitHub pulls API. ``close_source_branch`` is ignored; GitHub deletes
    head branches through a repository setting instead."""

    default_api_url = GITHUB_API_BASE

    def headers(self, credentials: Credentials | None) -> dict[str, str]:
        return {
            **super().headers(credentials),
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _pr_url(self, api_base: str, pr: PullRequest) -> str:
        return f"{api_base}/repos/{pr.repo.owner}/{pr.repo.name}/pulls/{pr.number}"

    async def query_mergeability(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest
    ) -> bool:
        data = await self.request("GET", self._pr_url(api_base, pr), credentials)

        if data.get("merged") or data.get("state") != "open":
            return False
        # mergeable is null while GitHub computes it; the merge call decides then
        return data.get("mergeable") is not False

    async def merge(
        self,
        credentials: Credentials | None,
        api_base: str,
        pr: PullRequest,
        strategy: MergeStrategy,
        message: str,
    ) -> None:
        await self.request(
            "PUT",
            f"{self._pr_url(api_base, pr)}/merge",
            credentials,
            json={"merge_method": _MERGE_METHODS[strategy], "commit_title": message},
        )

    async def post_comment(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest, text: str
    ) -> None:
        url = f"{api_base}/repos/{pr.repo.owner}/{pr.repo.name}/issues/{pr.number}/comments"
        await self.request("POST", url, credentials, json={"body": text})
