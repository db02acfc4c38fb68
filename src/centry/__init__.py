"""centry -- OAuth2 client SDK for the Centry REST API.

Typical workflow::

    from centry import Centry

    sdk = Centry(client_id, client_secret, "urn:ietf:wg:oauth:2.0:oob")
    url = sdk.authorization_url("public read_orders")
    # ... the user opens url and pastes back the code ...
    sdk.authorize(code)
    response = sdk.get("conexion/v1/orders.json", params={"limit": 5})

Modules:
    client: The :class:`Centry` client and its grant flows.
    models: Pydantic models (:class:`HTTPMethod`, :class:`ClientConfig`,
        :class:`TokenSet`).
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr diagnostics with Rich support.
    app: The ``centry`` command line tool.
"""

__version__ = "0.3.0"

from centry.client import PUBLIC_ENDPOINTS, Centry  # noqa: E402
from centry.exceptions import (  # noqa: E402
    CentryError,
    InvalidGrantResponseError,
    InvalidMethodError,
    NetworkError,
)
from centry.models import ClientConfig, HTTPMethod, TokenSet  # noqa: E402

__all__ = [
    "Centry",
    "CentryError",
    "ClientConfig",
    "HTTPMethod",
    "InvalidGrantResponseError",
    "InvalidMethodError",
    "NetworkError",
    "PUBLIC_ENDPOINTS",
    "TokenSet",
    "__version__",
]
