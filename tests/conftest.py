"""Shared builders for pull request snapshots."""

import pytest

from automerge.models import (
    Build,
    BuildStatus,
    Comment,
    Commit,
    Head,
    PullRequest,
    Repo,
    Review,
    ReviewState,
)

OWNER = "atomist"
REPO = "sdm-pack"
API_URL = "https://api.github.com"


def make_pr(
    *,
    number: int = 42,
    title: str | None = "Add feature",
    body: str | None = None,
    labels: tuple[str, ...] = (),
    comments: tuple[str, ...] = (),
    reviews: tuple[Review, ...] = (),
    commits: tuple[str, ...] = (),
    builds: tuple[BuildStatus, ...] = (),
    api_url: str | None = API_URL,
) -> PullRequest:
    return PullRequest(
        number=number,
        repo=Repo(owner=OWNER, name=REPO, api_url=api_url),
        title=title,
        body=body,
        labels=labels,
        comments=tuple(Comment(body=c) for c in comments),
        reviews=reviews,
        commits=tuple(Commit(message=m) for m in commits),
        head=Head(builds=tuple(Build(status=s) for s in builds)),
    )


def approved(*logins: str) -> Review:
    return Review(state=ReviewState.APPROVED, by=logins or ("alice",))


def changes_requested(*logins: str) -> Review:
    return Review(state=ReviewState.OTHER, by=logins or ("bob",))


@pytest.fixture
def pr_factory():
    return make_pr
