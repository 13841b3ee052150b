"""Provider credentials and the Authorization headers built from them."""

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class TokenCredentials:
    """Bearer token, e.g. an organization access token."""

    token: str

    def __repr__(self) -> str:
        return "TokenCredentials(token='***')"


@dataclass(frozen=True)
class BasicAuthCredentials:
    """Username and password (or app password) for basic auth."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"BasicAuthCredentials(username={self.username!r}, password='***')"


Credentials = TokenCredentials | BasicAuthCredentials


def authorization_header(credentials: Credentials | None) -> dict[str, str]:
    """Return the Authorization header for the given credential kind.

    ``None`` yields no header at all, for providers that allow anonymous reads.
    """
    if credentials is None:
        return {}
    if isinstance(credentials, BasicAuthCredentials):
        raw = f"{credentials.username}:{credentials.password}".encode("utf-8")
        return {"Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}"}
    return {"Authorization": f"Bearer {credentials.token}"}
