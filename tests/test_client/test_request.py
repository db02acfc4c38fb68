"""Tests for Centry.request and the verb shortcuts."""

from __future__ import annotations

import json

import httpx
import pytest

from centry.client import PUBLIC_ENDPOINTS, Centry
from centry.exceptions import InvalidMethodError, NetworkError
from centry.models import ClientConfig, HTTPMethod
from conftest import CLIENT_ID, CLIENT_SECRET, REDIRECT_URI


# ---------------------------------------------------------------------------
# URL and query string
# ---------------------------------------------------------------------------


class TestTargetUrl:
    def test_get_with_params(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="tok")
        response = sdk.request("conexion/v1/sizes.json", "get", {"limit": 5})

        assert response.status_code == 200
        assert str(transport.last.url) == "https://www.centry.cl/conexion/v1/sizes.json?limit=5"
        assert transport.last.method == "GET"

    def test_params_are_form_encoded(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("conexion/v1/products.json", {"q": "polera roja", "sku": "a&b"})

        assert transport.last.url.params["q"] == "polera roja"
        assert transport.last.url.params["sku"] == "a&b"
        assert b"q=polera+roja" in transport.last.url.query
        assert b"sku=a%26b" in transport.last.url.query

    @pytest.mark.parametrize("params", [None, {}])
    def test_no_query_string_without_params(self, make_sdk, params) -> None:
        sdk, transport = make_sdk()
        sdk.request("conexion/v1/sizes.json", HTTPMethod.GET, params)

        assert transport.last.url.query == b""
        assert str(transport.last.url) == "https://www.centry.cl/conexion/v1/sizes.json"

    def test_always_https(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("conexion/v1/sizes.json")
        sdk.post("oauth/token", payload={"grant_type": "client_credentials"})

        assert [r.url.scheme for r in transport.requests] == ["https", "https"]

    def test_leading_slash_is_ignored(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("/conexion/v1/sizes.json")
        assert transport.last.url.path == "/conexion/v1/sizes.json"

    def test_configured_host(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200))
        sdk = Centry(
            CLIENT_ID,
            CLIENT_SECRET,
            REDIRECT_URI,
            config=ClientConfig(host="staging.centry.cl"),
            transport=transport,
        )
        response = sdk.get("conexion/v1/sizes.json")
        assert response.request.url.host == "staging.centry.cl"


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


class TestHeaders:
    def test_json_headers_always_sent(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("conexion/v1/sizes.json")

        assert transport.last.headers["content-type"] == "application/json"
        assert transport.last.headers["accept"] == "application/json"
        assert transport.last.headers["user-agent"].startswith("centry-python/")

    def test_bearer_attached_to_private_endpoint(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="secret-token")
        sdk.get("conexion/v1/orders.json")
        assert transport.last.headers["authorization"] == "Bearer secret-token"

    def test_bearer_omitted_for_token_endpoint(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="secret-token")
        sdk.request("oauth/token", "get", {"a": "b"})
        assert "authorization" not in transport.last.headers

    def test_bearer_omitted_for_token_endpoint_with_leading_slash(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="secret-token")
        sdk.post("/oauth/token")
        assert "authorization" not in transport.last.headers

    def test_bearer_omitted_without_access_token(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("conexion/v1/orders.json")
        assert "authorization" not in transport.last.headers

    def test_bearer_follows_updated_access_token(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="old")
        sdk.access_token = "new"
        sdk.get("conexion/v1/orders.json")
        assert transport.last.headers["authorization"] == "Bearer new"

    def test_public_endpoints_is_immutable(self) -> None:
        assert PUBLIC_ENDPOINTS == frozenset({"oauth/token"})
        assert not hasattr(PUBLIC_ENDPOINTS, "add")


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


class TestBody:
    def test_post_serializes_payload(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="tok")
        payload = {"name": "Talla XL", "active": True, "tags": ["a", "b"]}
        sdk.post("conexion/v1/sizes.json", payload=payload)

        assert transport.last.method == "POST"
        assert json.loads(transport.last.content) == payload

    def test_put_serializes_payload(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="tok")
        sdk.put("conexion/v1/sizes/1.json", payload={"name": "L"})

        assert transport.last.method == "PUT"
        assert transport.last_json() == {"name": "L"}

    def test_delete_forwards_payload(self, make_sdk) -> None:
        sdk, transport = make_sdk(access_token="tok")
        sdk.delete("conexion/v1/webhooks/9.json", payload={"reason": "unused"})

        assert transport.last.method == "DELETE"
        assert transport.last_json() == {"reason": "unused"}

    @pytest.mark.parametrize("payload", [None, {}])
    def test_empty_payload_sends_no_body(self, make_sdk, payload) -> None:
        sdk, transport = make_sdk()
        sdk.request("conexion/v1/sizes.json", "post", None, payload)

        assert transport.last.content == b""
        assert transport.last.headers.get("content-length", "0") == "0"

    def test_get_sends_no_body(self, make_sdk) -> None:
        sdk, transport = make_sdk()
        sdk.get("conexion/v1/sizes.json", {"limit": 1})
        assert transport.last.content == b""


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------


class TestMethods:
    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            (HTTPMethod.GET, "GET"),
            ("get", "GET"),
            ("POST", "POST"),
            ("Put", "PUT"),
            (HTTPMethod.DELETE, "DELETE"),
        ],
    )
    def test_accepted_methods(self, make_sdk, method, expected) -> None:
        sdk, transport = make_sdk()
        sdk.request("conexion/v1/sizes.json", method)
        assert transport.last.method == expected

    @pytest.mark.parametrize("method", ["patch", "HEAD", "", None, 5])
    def test_invalid_method_raises_without_sending(self, make_sdk, method) -> None:
        sdk, transport = make_sdk()
        with pytest.raises(InvalidMethodError):
            sdk.request("conexion/v1/sizes.json", method)
        assert transport.requests == []

    def test_invalid_method_exit_code(self) -> None:
        assert InvalidMethodError("x").exit_code == 2


# ---------------------------------------------------------------------------
# Responses and failures
# ---------------------------------------------------------------------------


class TestResponses:
    @pytest.mark.parametrize("status", [301, 401, 404, 422, 500])
    def test_non_2xx_is_returned_not_raised(self, make_sdk, status) -> None:
        sdk, _ = make_sdk(lambda request: httpx.Response(status, json={"error": "nope"}))
        response = sdk.get("conexion/v1/orders.json")

        assert response.status_code == status
        assert response.json() == {"error": "nope"}

    def test_response_body_is_not_decoded(self, make_sdk) -> None:
        sdk, _ = make_sdk(lambda request: httpx.Response(200, text="<html>oops</html>"))
        response = sdk.get("conexion/v1/orders.json")
        assert response.text == "<html>oops</html>"

    def test_request_does_not_touch_tokens(self, make_sdk) -> None:
        sdk, _ = make_sdk(
            lambda request: httpx.Response(200, json={"access_token": "leak"}),
            access_token="mine",
            refresh_token="r",
        )
        sdk.post("oauth/token", payload={"grant_type": "client_credentials"})

        assert sdk.access_token == "mine"
        assert sdk.refresh_token == "r"

    def test_transport_failure_raises_network_error(self, make_sdk) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sdk, transport = make_sdk(handler)
        with pytest.raises(NetworkError) as exc_info:
            sdk.get("conexion/v1/orders.json")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.exit_code == 6
        assert len(transport.requests) == 1

    def test_timeout_raises_network_error(self, make_sdk) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        sdk, _ = make_sdk(handler)
        with pytest.raises(NetworkError, match="timed out"):
            sdk.get("conexion/v1/orders.json")
