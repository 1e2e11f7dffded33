"""Tests for the jurisdiction tax service HTTP client."""

import json
from decimal import Decimal

import httpx
import pytest

from homepurchase.data.tax_service import TaxServiceClient
from homepurchase.errors import ExternalSourceUnavailable
from homepurchase.models.purchase import DwellingType, PropertyType, Province

LTT_RESPONSE = {
    "purchasePrice": 575000,
    "dwellingUnits": 1,
    "provincialBeforeRebate": 7975,
    "provincialRebateApplied": 4000,
    "provincial": 3975,
    "municipalBeforeRebate": 7975,
    "municipalRebateApplied": 4475,
    "municipal": 3500,
    "nrst": 0,
    "total": 7475,
}

CMHC_RESPONSE = {"ltv": 0.95, "premiumRate": 4, "premium": 19000, "pstRate": 8, "pst": 1520}


def _client(handler) -> TaxServiceClient:
    return TaxServiceClient(
        base_url="http://tax.test/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


async def _ltt(client: TaxServiceClient):
    return await client.get_land_transfer_tax(
        purchase_price=Decimal("575000"),
        is_toronto_property=True,
        first_time_buyer=True,
        is_non_resident=False,
        property_type=PropertyType.DETACHED,
        dwelling_type=DwellingType.SINGLE_FAMILY,
    )


class TestLandTransferTax:
    async def test_parses_response(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=LTT_RESPONSE)

        result = await _ltt(_client(handler))

        assert str(requests[0].url) == "http://tax.test/api/tax/land-transfer"
        body = json.loads(requests[0].content)
        assert body["isToronto"] is True
        assert body["firstTimeBuyer"] is True
        assert body["dwellingType"] == "Single Family"
        assert result.provincial_rebate_applied == Decimal("4000")
        assert result.municipal == Decimal("3500")
        assert result.total == Decimal("7475")

    async def test_server_error(self):
        client = _client(lambda request: httpx.Response(500, json={"error": "Internal error"}))
        with pytest.raises(ExternalSourceUnavailable):
            await _ltt(client)

    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(ExternalSourceUnavailable):
            await _ltt(_client(handler))

    async def test_missing_total(self):
        payload = {k: v for k, v in LTT_RESPONSE.items() if k != "total"}
        client = _client(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(ExternalSourceUnavailable):
            await _ltt(client)

    async def test_not_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(ExternalSourceUnavailable):
            await _ltt(client)

    async def test_list_body(self):
        client = _client(lambda request: httpx.Response(200, json=[LTT_RESPONSE]))
        with pytest.raises(ExternalSourceUnavailable):
            await _ltt(client)


class TestCMHCPST:
    async def test_parses_percentages(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=CMHC_RESPONSE)

        result = await _client(handler).get_cmhc_pst(Decimal("500000"), Decimal("25000"), Province.ON)

        assert json.loads(requests[0].content)["province"] == "ON"
        assert result.insurable is True
        assert result.premium_rate == Decimal("0.04")
        assert result.pst_rate == Decimal("0.08")
        assert result.premium == Decimal("19000")
        assert result.pst == Decimal("1520")

    async def test_uninsurable_response(self):
        payload = {"ltv": 0.96, "premiumRate": 0, "premium": 0, "pstRate": 8, "pst": 0}
        client = _client(lambda request: httpx.Response(200, json=payload))
        result = await client.get_cmhc_pst(Decimal("500000"), Decimal("20000"), Province.ON)
        assert result.insurable is False
        assert result.premium_rate is None

    async def test_bad_request(self):
        client = _client(lambda request: httpx.Response(400, json={"error": "downPayment out of range"}))
        with pytest.raises(ExternalSourceUnavailable):
            await client.get_cmhc_pst(Decimal("500000"), Decimal("25000"), Province.ON)

    async def test_list_body(self):
        client = _client(lambda request: httpx.Response(200, json=[CMHC_RESPONSE]))
        with pytest.raises(ExternalSourceUnavailable):
            await client.get_cmhc_pst(Decimal("500000"), Decimal("25000"), Province.ON)
