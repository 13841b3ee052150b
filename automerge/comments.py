"""Text of the comment posted after an auto-merge."""

from automerge.config import MarkerConfig
from automerge.models import PullRequest, ReviewState
from automerge.tagging import trigger_tag


def review_summary(pr: PullRequest) -> str:
    approved = [r for r in pr.reviews if r.state is ReviewState.APPROVED]
    if not approved:
        return "No approved reviews" if pr.reviews else "No reviews"
    count = len(approved)
    noun = "reviews" if count > 1 else "review"
    authors = ", ".join(f"@{login}" for review in approved for login in review.by)
    if not authors:
        return f"{count} approved {noun}"
    return f"{count} approved {noun} by {authors}"


def check_summary(pr: PullRequest) -> str:
    if not pr.head.builds:
        return "No checks"
    count = len(pr.head.builds)
    noun = "checks" if count > 1 else "check"
    return f"{count} successful {noun}"


def merged_comment(pr: PullRequest, markers: MarkerConfig) -> str:
    """Return the markdown comment announcing the merge."""
    return (
        "Pull request auto merged.\n"
        "\n"
        f"* {review_summary(pr)}\n"
        f"* {check_summary(pr)}\n"
        "\n"
        f"[{markers.generated_label}] {trigger_tag(pr, markers)}"
    )


def merge_commit_message(pr: PullRequest) -> str:
    """Return the message passed along with the merge call."""
    title = pr.title or f"Pull request #{pr.number}"
    return f"{title} (#{pr.number})"
