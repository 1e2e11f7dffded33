"""Tests for the CMA proxy client."""

from decimal import Decimal

import httpx

from homepurchase.data.cma import CMAClient


def _cma(handler, **overrides) -> CMAClient:
    kwargs = dict(
        enabled=True,
        base_url="https://cma.test/v1/",
        auth_header="x-api-key",
        api_key="secret",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )
    kwargs.update(overrides)
    return CMAClient(**kwargs)


class TestCMAClient:
    async def test_placeholder_when_disabled(self):
        client = _cma(lambda request: httpx.Response(200, json={"amount": 1}), enabled=False)
        assert await client.proxy("land-transfer-tax", {}) == {"amount": Decimal("0"), "source": "placeholder"}

    async def test_placeholder_without_key(self):
        client = _cma(lambda request: httpx.Response(200, json={"amount": 1}), api_key="")
        result = await client.proxy("land-transfer-tax", {})
        assert result["source"] == "placeholder"

    async def test_forwards_payload_with_auth_header(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"amount": 7975.5})

        result = await _cma(handler).proxy("/land-transfer-tax", {"purchasePrice": 575000})

        assert str(requests[0].url) == "https://cma.test/v1/land-transfer-tax"
        assert requests[0].headers["x-api-key"] == "secret"
        assert result == {"amount": Decimal("7975.5"), "source": "cma"}

    async def test_total_key_accepted(self):
        client = _cma(lambda request: httpx.Response(200, json={"total": 1520}))
        result = await client.proxy("cmhc-insurance-tax", None)
        assert result == {"amount": Decimal("1520"), "source": "cma"}

    async def test_failure_returns_fallback(self):
        client = _cma(lambda request: httpx.Response(502))
        result = await client.proxy("cmhc-insurance-tax", {}, fallback_amount=Decimal("12.34"))
        assert result == {"amount": Decimal("12.34"), "source": "fallback"}
