"""OAuth2 client for the Centry REST API.

This module provides :class:`Centry`, a small synchronous client that:

- **Builds authorization URLs** -- :meth:`Centry.authorization_url` returns
  the page where a user grants the application access to the requested
  scopes.
- **Performs the OAuth2 grants** -- :meth:`Centry.authorize`,
  :meth:`Centry.refresh` and :meth:`Centry.client_credentials` all POST to
  the public ``oauth/token`` endpoint and copy the token fields of the
  response onto the client.
- **Issues authenticated requests** -- :meth:`Centry.request` (and the
  :meth:`~Centry.get` / :meth:`~Centry.post` / :meth:`~Centry.put` /
  :meth:`~Centry.delete` shortcuts) send JSON to the API with an
  ``Authorization: Bearer`` header.

The client keeps no connection open between calls and never retries. Token
persistence is left to the caller: read the token fields (or
:meth:`Centry.tokens`) after a grant and store them, then pass them back to
the constructor (or :meth:`Centry.from_tokens`) next time.

Example::

    from centry import Centry

    sdk = Centry(client_id, client_secret, "urn:ietf:wg:oauth:2.0:oob")
    print(sdk.authorization_url("public read_orders"))
    sdk.authorize(input("Code: "))
    sizes = sdk.get("conexion/v1/sizes.json", params={"limit": 5}).json()
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx

from centry.exceptions import InvalidGrantResponseError, InvalidMethodError, NetworkError
from centry.models import ClientConfig, HTTPMethod, TokenSet
from centry.output import debug

TOKEN_ENDPOINT = "oauth/token"
AUTHORIZE_ENDPOINT = "oauth/authorize"

# Endpoints reachable without a bearer token.
PUBLIC_ENDPOINTS: frozenset[str] = frozenset({TOKEN_ENDPOINT})


def _resolve_method(method: Union[HTTPMethod, str]) -> HTTPMethod:
    try:
        return HTTPMethod(method)
    except ValueError:
        raise InvalidMethodError(
            f"Unsupported HTTP method {method!r}; expected one of GET, POST, PUT, DELETE"
        ) from None


class Centry:
    """Client for the Centry API.

    ``client_id``, ``client_secret`` and ``redirect_uri`` identify the
    registered application and cannot be changed after construction. The
    token fields (``access_token``, ``refresh_token``, ``token_type``,
    ``scope``, ``created_at``, ``expires_in``) are plain attributes: every
    successful grant overwrites them, and callers may read or set them to
    persist and restore a session.

    Instances are not thread-safe. Concurrent grant calls on one client
    race on the token fields and must be serialized by the caller.

    Args:
        client_id: Application identifier issued by Centry.
        client_secret: Application secret issued by Centry. Never share it
            with end users.
        redirect_uri: URL Centry redirects to with the authorization code.
            With ``urn:ietf:wg:oauth:2.0:oob`` the code is shown on screen
            for the user to copy.
        access_token: Previously stored access token, if any.
        refresh_token: Previously stored refresh token, if any.
        config: Transport settings. Defaults to :class:`ClientConfig`.
        transport: Optional :class:`httpx.BaseTransport` used for every
            request instead of the default network transport.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._config = config or ClientConfig()
        self._transport = transport

        self.access_token: Optional[str] = access_token
        self.refresh_token: Optional[str] = refresh_token
        self.token_type: Optional[str] = None
        self.scope: Optional[str] = None
        self.created_at: Any = None
        self.expires_in: Any = None

    @classmethod
    def from_tokens(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        tokens: TokenSet,
        **kwargs: Any,
    ) -> Centry:
        """Build a client whose token fields are restored from *tokens*.

        Args:
            client_id: Application identifier.
            client_secret: Application secret.
            redirect_uri: Registered redirect URI.
            tokens: A snapshot previously produced by :meth:`tokens`.
            **kwargs: Forwarded to the constructor (``config``, ``transport``).
        """
        client = cls(client_id, client_secret, redirect_uri, **kwargs)
        client.apply_grant_response(tokens.as_grant_response())
        return client

    def __repr__(self) -> str:
        state = "authorized" if self.access_token else "unauthorized"
        return f"<Centry client_id={self._client_id!r} {state}>"

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    @property
    def config(self) -> ClientConfig:
        return self._config

    def tokens(self) -> TokenSet:
        """Return a :class:`TokenSet` snapshot of the current token fields."""
        return TokenSet(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            token_type=self.token_type,
            scope=self.scope,
            created_at=self.created_at,
            expires_in=self.expires_in,
        )

    # ------------------------------------------------------------------ #
    # Authorization URL
    # ------------------------------------------------------------------ #

    def authorization_url(self, scope: str) -> str:
        """Build the URL where a user authorizes this application.

        Args:
            scope: Space-separated scopes to request, e.g.
                ``"public read_orders write_webhook"``. Known scopes are
                ``public``, ``read_orders``, ``write_orders``,
                ``read_products``, ``write_products``,
                ``read_integration_config``, ``write_integration_config``,
                ``read_user``, ``write_user``, ``read_webhook`` and
                ``write_webhook``.

        Returns:
            The form-encoded authorization URL. No request is made.
        """
        query = urlencode(
            {
                "client_id": self._client_id,
                "redirect_uri": self._redirect_uri,
                "response_type": "code",
                "scope": scope,
            }
        )
        return f"{self._config.base_url}/{AUTHORIZE_ENDPOINT}?{query}"

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def request(
        self,
        endpoint: str,
        method: Union[HTTPMethod, str],
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Send a request to the Centry API.

        Args:
            endpoint: Path relative to the API host, e.g.
                ``"conexion/v1/sizes.json"``.
            method: An :class:`HTTPMethod` or its name in any case.
            params: Query-string parameters. Omitted when empty.
            payload: JSON body. Omitted when empty.

        Returns:
            The :class:`httpx.Response`, whatever its status code. Non-2xx
            responses are not raised; inspect ``status_code`` instead.

        Raises:
            InvalidMethodError: If *method* is not GET, POST, PUT or DELETE.
            NetworkError: On connection, TLS or timeout failures.
        """
        verb = _resolve_method(method)
        path = endpoint.lstrip("/")
        url = f"{self._config.base_url}/{path}"

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }
        if path not in PUBLIC_ENDPOINTS and self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        kwargs: dict[str, Any] = {
            "method": verb.value.upper(),
            "url": url,
            "headers": headers,
        }
        if params:
            kwargs["params"] = dict(params)
        if payload:
            kwargs["json"] = dict(payload)

        debug(f"{kwargs['method']} {url}")
        try:
            with httpx.Client(timeout=self._config.timeout, transport=self._transport) as http:
                response = http.request(**kwargs)
        except httpx.TransportError as exc:
            raise NetworkError(f"{kwargs['method']} {url} failed: {exc}") from exc

        debug(f"HTTP {response.status_code} {response.reason_phrase}")
        return response

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        """Send a GET request. See :meth:`request`."""
        return self.request(endpoint, HTTPMethod.GET, params)

    def post(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Send a POST request. See :meth:`request`."""
        return self.request(endpoint, HTTPMethod.POST, params, payload)

    def put(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Send a PUT request. See :meth:`request`."""
        return self.request(endpoint, HTTPMethod.PUT, params, payload)

    def delete(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Send a DELETE request. See :meth:`request`."""
        return self.request(endpoint, HTTPMethod.DELETE, params, payload)

    # ------------------------------------------------------------------ #
    # Grants
    # ------------------------------------------------------------------ #

    def authorize(self, code: str) -> None:
        """Exchange an authorization code for the first access and refresh tokens.

        The code is produced by Centry once the user accepts the page from
        :meth:`authorization_url`. Persist the resulting tokens.

        Raises:
            InvalidGrantResponseError: If the token endpoint does not answer
                with a JSON object.
            NetworkError: On transport failures.
        """
        self._grant("authorization_code", {"code": code})

    def refresh(self) -> None:
        """Trade the current refresh token for a new token pair.

        Access tokens last 7200 seconds (two hours); call this once they
        expire and persist the new tokens.

        Raises:
            InvalidGrantResponseError: If the token endpoint does not answer
                with a JSON object.
            NetworkError: On transport failures.
        """
        self._grant("refresh_token", {"refresh_token": self.refresh_token})

    def client_credentials(self, scope: Optional[str] = None) -> None:
        """Obtain an application token with the client credentials grant.

        Args:
            scope: Space-separated scopes. A blank or missing scope is left
                out of the request entirely, since the API treats an empty
                ``scope`` differently from an absent one.
        """
        extras: dict[str, Any] = {}
        if scope is not None and scope.strip():
            extras["scope"] = scope.strip()
        self._grant("client_credentials", extras)

    def apply_grant_response(self, data: Mapping[str, Any]) -> None:
        """Copy the token fields of a parsed grant response onto the client.

        Every field is overwritten; keys absent from *data* become ``None``.
        """
        self.access_token = data.get("access_token")
        self.refresh_token = data.get("refresh_token")
        self.token_type = data.get("token_type")
        self.scope = data.get("scope")
        self.created_at = data.get("created_at")
        self.expires_in = data.get("expires_in")

    def _grant(self, grant_type: str, extras: Optional[Mapping[str, Any]] = None) -> None:
        payload: dict[str, Any] = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "redirect_uri": self._redirect_uri,
            "grant_type": grant_type,
        }
        payload.update(extras or {})

        debug(f"Requesting {grant_type} grant")
        response = self.request(TOKEN_ENDPOINT, HTTPMethod.POST, None, payload)

        try:
            data = response.json()
        except ValueError as exc:
            raise InvalidGrantResponseError(
                f"Token endpoint returned HTTP {response.status_code} with a non-JSON body",
                response=response,
            ) from exc
        if not isinstance(data, dict):
            raise InvalidGrantResponseError(
                f"Token endpoint returned HTTP {response.status_code} with a JSON "
                f"{type(data).__name__} instead of an object",
                response=response,
            )

        self.apply_grant_response(data)
        debug(f"Token fields updated from {grant_type} grant (token_type={self.token_type})")
