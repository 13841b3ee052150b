"""Detection of auto-merge markers on a pull request."""

from automerge.config import MarkerConfig
from automerge.models import PullRequest


def contains_tag(text: str | None, tag: str) -> bool:
    """Return True if ``tag`` occurs verbatim in ``text``.

    Matching is case-sensitive; missing text never matches.
    """
    return bool(text) and tag in text


def is_tagged(pr: PullRequest, label: str, tag: str) -> bool:
    """Return True if the pull request carries the given marker.

    A marker is present when a label equals ``label`` or when ``tag`` appears
    in the title, body, any comment (top-level or under a review) or any
    commit message.
    """
    if label in pr.labels:
        return True

    if contains_tag(pr.title, tag) or contains_tag(pr.body, tag):
        return True

    if any(contains_tag(c.body, tag) for c in pr.comments):
        return True

    if any(contains_tag(c.body, tag) for r in pr.reviews for c in r.comments):
        return True

    return any(contains_tag(c.message, tag) for c in pr.commits)


def is_approval_tagged(pr: PullRequest, markers: MarkerConfig) -> bool:
    return is_tagged(pr, markers.approval_label, markers.approval_tag)


def is_check_success_tagged(pr: PullRequest, markers: MarkerConfig) -> bool:
    return is_tagged(pr, markers.check_success_label, markers.check_success_tag)


def is_auto_merge_enabled(pr: PullRequest, markers: MarkerConfig) -> bool:
    """Return True if either auto-merge trigger was requested."""
    return is_approval_tagged(pr, markers) or is_check_success_tagged(pr, markers)


def trigger_tag(pr: PullRequest, markers: MarkerConfig) -> str:
    """Return the tag that explains why the pull request was merged."""
    if is_check_success_tagged(pr, markers):
        return markers.check_success_tag
    return markers.approval_tag
