"""Application configuration loaded from environment variables."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from automerge.credentials import BasicAuthCredentials, Credentials, TokenCredentials

ProviderKind = Literal["github", "bitbucket-server", "bitbucket-cloud"]


@dataclass(frozen=True)
class MarkerConfig:
    """Marker strings that opt a pull request into auto-merge."""

    approval_label: str = "auto-merge:on-approve"
    approval_tag: str = "[auto-merge:on-approve]"
    check_success_label: str = "auto-merge:on-check-success"
    check_success_tag: str = "[auto-merge:on-check-success]"
    strategy_label_prefix: str = "auto-merge-method:"
    strategy_separator: str = ":"
    generated_label: str = "atomist:generated"


DEFAULT_MARKERS = MarkerConfig()


class Settings(BaseSettings):
    """All configuration values for the service, sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOMERGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Organization access token, sent as a bearer token
    org_token: SecretStr | None = None

    # Basic auth, used instead of the token when both are set
    username: str | None = None
    password: SecretStr | None = None

    provider: ProviderKind = "github"

    # API base used when the event does not name one
    api_url: str | None = None

    # Seconds allowed for each individual provider call
    http_timeout: float = 10.0

    # Shared secret for X-Hub-Signature-256; empty disables verification
    webhook_secret: SecretStr | None = None

    # Bitbucket Cloud only; GitHub and Bitbucket Server keep the source branch
    close_source_branch: bool = True

    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    def credentials(self) -> Credentials | None:
        """Return the credentials to call the provider with.

        ``None`` when nothing is configured; calls then go out unauthenticated.
        """
        if self.username and self.password is not None:
            return BasicAuthCredentials(self.username, self.password.get_secret_value())
        if self.org_token is not None and self.org_token.get_secret_value():
            return TokenCredentials(self.org_token.get_secret_value())
        return None

    def markers(self) -> MarkerConfig:
        return DEFAULT_MARKERS


@lru_cache
def get_settings() -> Settings:
    """Return a cached singleton of Settings."""
    return Settings()
