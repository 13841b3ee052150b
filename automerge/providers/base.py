"""Provider gateway interface and the HTTP plumbing shared by all backends."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from automerge.credentials import Credentials, authorization_header
from automerge.errors import (
    MergeConflictError,
    ProviderAuthError,
    ProviderError,
    ProviderNotFoundError,
    ProviderServerError,
)
from automerge.models import MergeStrategy, PullRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ProviderGateway(ABC):
    """Merge and comment operations against one source-control provider."""

    #: API base used when neither the event nor the settings supply one.
    default_api_url: str | None = None

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, close_source_branch: bool = True) -> None:
        self.timeout = timeout
        # Only honoured by providers whose merge call accepts it
        self.close_source_branch = close_source_branch

    @abstractmethod
    async def query_mergeability(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest
    ) -> bool:
        """Return True if the provider would accept a merge right now."""

    @abstractmethod
    async def merge(
        self,
        credentials: Credentials | None,
        api_base: str,
        pr: PullRequest,
        strategy: MergeStrategy,
        message: str,
    ) -> None:
        """Merge the pull request using ``strategy``."""

    @abstractmethod
    async def post_comment(
        self, credentials: Credentials | None, api_base: str, pr: PullRequest, text: str
    ) -> None:
        """Post ``text`` as a comment on the pull request."""

    def headers(self, credentials: Credentials | None) -> dict[str, str]:
        return {"Accept": "application/json", **authorization_header(credentials)}

    async def request(
        self,
        method: str,
        url: str,
        credentials: Credentials | None,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Transport failures, error statuses and undecodable bodies all raise a
        :class:`ProviderError`.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method, url, headers=self.headers(credentials), params=params, json=json
                )
        except httpx.TimeoutException as exc:
            raise ProviderError(f"{method} {url} timed out after {self.timeout}s.") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> HTTP %d", method, url, response.status_code)
        raise_for_status(response, method, url)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(
                f"{method} {url} returned a malformed body.", response.status_code
            ) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                f"{method} {url} returned unexpected JSON.", response.status_code
            )
        return body


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        # GitHub and Bitbucket Cloud use "message"/"error", Bitbucket Server "errors"
        if body.get("message"):
            return str(body["message"])
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            return str(errors[0].get("message", ""))
    return f"HTTP {response.status_code}"


def raise_for_status(response: httpx.Response, method: str, url: str) -> None:
    """Map an error response to the matching ProviderError subclass."""
    status = response.status_code
    if status < 400:
        return

    reason = _error_message(response)
    message = f"{method} {url} failed: HTTP {status} {reason}"

    if status in (401, 403):
        raise ProviderAuthError(message, status)
    if status == 404:
        raise ProviderNotFoundError(message, status)
    if status in (405, 409):
        raise MergeConflictError(message, status)
    if status >= 500:
        raise ProviderServerError(message, status)
    raise ProviderError(message, status)
