"""Pydantic models shared across centry.

* :class:`HTTPMethod` -- the four verbs the Centry API client accepts.
* :class:`ClientConfig` -- transport settings for :class:`~centry.client.Centry`.
* :class:`TokenSet` -- a snapshot of the client's token fields, suitable for
  persisting between sessions and restoring with
  :meth:`~centry.client.Centry.from_tokens`.
"""

from __future__ import annotations

import enum
import time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _default_user_agent() -> str:
    from centry import __version__

    return f"centry-python/{__version__}"


class HTTPMethod(str, enum.Enum):
    """HTTP methods accepted by :meth:`~centry.client.Centry.request`.

    Lookup by value is case-insensitive, so ``HTTPMethod("GET")`` and
    ``HTTPMethod("get")`` both resolve to :attr:`GET`.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"

    @classmethod
    def _missing_(cls, value: object) -> Optional[HTTPMethod]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class ClientConfig(BaseModel):
    """Transport settings for a :class:`~centry.client.Centry` client.

    TLS verification is always on and deliberately not configurable.

    Example::

        ClientConfig(timeout=10)
    """

    host: str = Field(default="www.centry.cl", description="API host name")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    user_agent: str = Field(
        default_factory=_default_user_agent,
        description="User-Agent header sent with every request",
    )

    @property
    def base_url(self) -> str:
        return f"https://{self.host}"


class TokenSet(BaseModel):
    """Token fields as returned by the ``oauth/token`` endpoint.

    Every field is optional and untyped: the grant response is mirrored
    verbatim, so a server that sends ``created_at`` as a string still yields a
    snapshot. Missing keys stay ``None``; unknown keys are preserved in
    ``model_extra``.

    See Also:
        :meth:`centry.client.Centry.tokens`: Build a snapshot from a client.
        :meth:`centry.client.Centry.from_tokens`: Restore a client from one.
    """

    model_config = ConfigDict(extra="allow")

    access_token: Any = None
    refresh_token: Any = None
    token_type: Any = None
    scope: Any = None
    created_at: Any = Field(
        default=None, description="Unix timestamp at which the token was issued"
    )
    expires_in: Any = Field(
        default=None, description="Token lifetime in seconds"
    )

    @property
    def expires_at(self) -> Optional[float]:
        """Unix timestamp at which the access token expires, if known."""
        if not (_is_number(self.created_at) and _is_number(self.expires_in)):
            return None
        return self.created_at + self.expires_in

    def is_expired(self, now: Optional[float] = None, leeway: float = 30.0) -> bool:
        """Return ``True`` when the access token expires within *leeway* seconds.

        A token whose expiry cannot be computed (``created_at`` or
        ``expires_in`` missing or not numeric) is reported as not expired.

        Args:
            now: Reference Unix timestamp. Defaults to :func:`time.time`.
            leeway: Safety margin in seconds.
        """
        expires_at = self.expires_at
        if expires_at is None:
            return False
        if now is None:
            now = time.time()
        return now >= expires_at - leeway

    def as_grant_response(self) -> dict[str, Any]:
        """Return the six token fields as a plain dict."""
        return self.model_dump(
            include={
                "access_token",
                "refresh_token",
                "token_type",
                "scope",
                "created_at",
                "expires_in",
            }
        )
