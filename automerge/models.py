"""Pull request snapshot types consumed by the auto-merge evaluator."""

from dataclasses import dataclass, field
from enum import Enum


class ReviewState(Enum):
    """Review outcome as far as auto-merge is concerned."""

    APPROVED = "approved"
    OTHER = "other"


class BuildStatus(Enum):
    """Status of one build or status check on the head commit."""

    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"
    BROKEN = "broken"
    STARTED = "started"
    CANCELED = "canceled"
    ERROR = "error"


class MergeStrategy(Enum):
    """Merge strategies a pull request may request through a label."""

    MERGE_COMMIT = "merge-commit"
    FAST_FORWARD = "fast-forward"
    SQUASH = "squash"


@dataclass(frozen=True)
class Comment:
    body: str | None = None


@dataclass(frozen=True)
class Commit:
    message: str | None = None


@dataclass(frozen=True)
class Review:
    state: ReviewState
    comments: tuple[Comment, ...] = ()
    by: tuple[str, ...] = ()


@dataclass(frozen=True)
class Build:
    status: BuildStatus


@dataclass(frozen=True)
class Head:
    builds: tuple[Build, ...] = ()


@dataclass(frozen=True)
class Repo:
    """Repository coordinates plus the provider API base it lives on."""

    owner: str
    name: str
    api_url: str | None = None


@dataclass(frozen=True)
class PullRequest:
    """Read-only snapshot of a pull request, built fresh for every event.

    ``labels`` keeps the order the event delivered them in; only strategy
    selection looks at that order.
    """

    number: int
    repo: Repo
    title: str | None = None
    body: str | None = None
    labels: tuple[str, ...] = ()
    comments: tuple[Comment, ...] = ()
    reviews: tuple[Review, ...] = ()
    commits: tuple[Commit, ...] = ()
    head: Head = field(default_factory=Head)
