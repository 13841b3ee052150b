"""Lookup of provider gateways by configured kind."""

from automerge.errors import ConfigurationError
from automerge.providers.base import DEFAULT_TIMEOUT, ProviderGateway
from automerge.providers.bitbucket_cloud import BitbucketCloudGateway
from automerge.providers.bitbucket_server import BitbucketServerGateway
from automerge.providers.github import GitHubGateway

GATEWAYS: dict[str, type[ProviderGateway]] = {
    "github": GitHubGateway,
    "bitbucket-server": BitbucketServerGateway,
    "bitbucket-cloud": BitbucketCloudGateway,
}


def get_gateway(
    kind: str, timeout: float = DEFAULT_TIMEOUT, close_source_branch: bool = True
) -> ProviderGateway:
    """Return a gateway instance for ``kind``."""
    try:
        gateway_cls = GATEWAYS[kind]
    except KeyError:
        known = ", ".join(sorted(GATEWAYS))
        raise ConfigurationError(f"Unknown provider {kind!r}; expected one of {known}.") from None
    return gateway_cls(timeout=timeout, close_source_branch=close_source_branch)
