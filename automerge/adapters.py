"""Translation of inbound event payloads into PullRequest snapshots.

Providers describe the same things with different shapes: checks arrive as
``head.builds[].status`` or as ``head.statuses[].state``, comments sit on the
pull request or under each review, labels are objects or plain names. All of
that is flattened here so the evaluator sees a single shape.
"""

from typing import Any

from automerge.errors import EventPayloadError
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

# Commit-status states (GitHub, Bitbucket) mapped onto build statuses
_STATUS_STATES = {
    "success": BuildStatus.PASSED,
    "successful": BuildStatus.PASSED,
    "failure": BuildStatus.FAILED,
    "failed": BuildStatus.FAILED,
    "error": BuildStatus.ERROR,
    "pending": BuildStatus.PENDING,
    "inprogress": BuildStatus.PENDING,
    "in_progress": BuildStatus.PENDING,
    "stopped": BuildStatus.CANCELED,
}

_BUILD_STATUSES = {s.value: s for s in BuildStatus}


def _as_list(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise EventPayloadError(f"Expected a list for {field!r}, got {type(value).__name__}.")
    return value


def _objects(value: Any, field: str) -> list[dict[str, Any]]:
    items = _as_list(value, field)
    if not all(isinstance(item, dict) for item in items):
        raise EventPayloadError(f"Expected objects in {field!r}.")
    return items


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _login(value: Any) -> str | None:
    if isinstance(value, dict):
        return _text(value.get("login") or value.get("name"))
    return _text(value)


def api_url(repo: dict[str, Any]) -> str | None:
    """Return the provider API base named by the repository, if any."""
    org = repo.get("org") or {}
    if not isinstance(org, dict):
        raise EventPayloadError("Repository org must be a JSON object.")
    provider = org.get("provider") or {}
    if not isinstance(provider, dict):
        raise EventPayloadError("Repository provider must be a JSON object.")
    url = provider.get("apiUrl")
    if not url:
        return None
    if not isinstance(url, str):
        raise EventPayloadError("Provider apiUrl must be a string.")
    return url[:-1] if url.endswith("/") else url


def _comments(raw: Any, field: str) -> tuple[Comment, ...]:
    return tuple(Comment(body=_text(c.get("body"))) for c in _objects(raw, field))


def _review(raw: dict[str, Any]) -> Review:
    state = str(raw.get("state") or "").lower()
    by = [_login(b) for b in _as_list(raw.get("by"), "reviews.by")]
    if not by and raw.get("user"):
        by = [_login(raw["user"])]
    return Review(
        state=ReviewState.APPROVED if state == "approved" else ReviewState.OTHER,
        comments=_comments(raw.get("comments"), "reviews.comments"),
        by=tuple(login for login in by if login),
    )


def _build_status(value: Any) -> BuildStatus:
    status = str(value or "").lower()
    return _BUILD_STATUSES.get(status) or _STATUS_STATES.get(status, BuildStatus.PENDING)


def _head(raw: Any) -> Head:
    if not raw:
        return Head()
    if not isinstance(raw, dict):
        raise EventPayloadError("Pull request head must be a JSON object.")
    if raw.get("builds") is not None:
        builds = [_build_status(b.get("status")) for b in _objects(raw["builds"], "head.builds")]
    else:
        builds = [
            _build_status(s.get("state")) for s in _objects(raw.get("statuses"), "head.statuses")
        ]
    return Head(builds=tuple(Build(status=s) for s in builds))


def _labels(raw: Any) -> tuple[str, ...]:
    names: list[str] = []
    for label in _as_list(raw, "labels"):
        name = label.get("name") if isinstance(label, dict) else label
        if isinstance(name, str) and name not in names:
            names.append(name)
    return tuple(names)


def _repo(raw: Any) -> Repo:
    if not isinstance(raw, dict) or not raw.get("owner") or not raw.get("name"):
        raise EventPayloadError("Pull request has no repository owner/name.")
    owner = raw["owner"]
    if isinstance(owner, dict):
        owner = owner.get("login") or owner.get("key")
    return Repo(owner=str(owner), name=str(raw["name"]), api_url=api_url(raw))


def pull_request_from_payload(raw: dict[str, Any] | None) -> PullRequest | None:
    """Build a PullRequest from a provider-neutral pull request object."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise EventPayloadError("Pull request must be a JSON object.")

    number = raw.get("number")
    if isinstance(number, bool) or not isinstance(number, int):
        raise EventPayloadError("Pull request has no integer 'number'.")

    return PullRequest(
        number=number,
        repo=_repo(raw.get("repo")),
        title=_text(raw.get("title")),
        body=_text(raw.get("body")),
        labels=_labels(raw.get("labels")),
        comments=_comments(raw.get("comments"), "comments"),
        reviews=tuple(_review(r) for r in _objects(raw.get("reviews"), "reviews")),
        commits=tuple(
            Commit(message=_text(c.get("message"))) for c in _objects(raw.get("commits"), "commits")
        ),
        head=_head(raw.get("head")),
    )


def _nested_pull_request(payload: dict[str, Any], key: str) -> dict[str, Any] | None:
    event = payload.get(key)
    if event is None:
        return None
    if not isinstance(event, dict):
        raise EventPayloadError(f"Event {key!r} must be a JSON object.")
    return event.get("pullRequest")


def pull_request_from_build_event(payload: dict[str, Any]) -> PullRequest | None:
    """Return the pull request a build-status-changed event refers to."""
    return pull_request_from_payload(_nested_pull_request(payload, "build"))


def pull_request_from_review_event(payload: dict[str, Any]) -> PullRequest | None:
    """Return the pull request a review-submitted event refers to."""
    return pull_request_from_payload(_nested_pull_request(payload, "review"))


def pull_request_from_pull_request_event(payload: dict[str, Any]) -> PullRequest | None:
    """Return the pull request carried by a pull-request-updated event."""
    return pull_request_from_payload(payload.get("pullRequest"))
