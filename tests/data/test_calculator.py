"""Tests for the async purchase calculator and its source fallbacks."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from homepurchase.data.base import CMHCTaxSource, LandTransferTaxSource, MarketRateSource
from homepurchase.data.calculator import (
    CMHC_FALLBACK_WARNING,
    LTT_FALLBACK_WARNING,
    PurchaseCalculator,
)
from homepurchase.data.local import LocalTaxService
from homepurchase.data.rates import FiveYearFixedRateSource
from homepurchase.data.tax_service import TaxServiceClient
from homepurchase.errors import ExternalSourceUnavailable
from homepurchase.models.purchase import Province, PurchaseInputs
from homepurchase.models.results import CMHCResult, LandTransferTaxResult, MarketRate


@pytest.fixture
def failing_source():
    source = AsyncMock()
    source.get_land_transfer_tax.side_effect = ExternalSourceUnavailable("timeout")
    source.get_cmhc_pst.side_effect = ExternalSourceUnavailable("timeout")
    return source


class TestLocalCalculation:
    async def test_canonical(self, canonical_inputs):
        summary = await PurchaseCalculator().calculate(canonical_inputs)
        assert summary.land_transfer_tax.total == Decimal("12950.00")
        assert summary.cmhc.pst == Decimal("1520.00")
        assert summary.total_cash_at_closing == Decimal("31470.00")
        assert summary.total_monthly_carrying_cost == Decimal("3973.13")
        assert summary.warnings == []
        assert summary.validation_messages == []

    async def test_idempotent(self, canonical_inputs):
        calculator = PurchaseCalculator()
        first = await calculator.calculate(canonical_inputs)
        second = await calculator.calculate(canonical_inputs)
        assert first == second

    async def test_invalid_inputs_reported_not_raised(self):
        inputs = PurchaseInputs(
            purchase_price=Decimal("0"),
            down_payment=Decimal("10"),
            apr_percent=Decimal("-1"),
        )
        summary = await PurchaseCalculator().calculate(inputs)
        assert summary.land_transfer_tax.total == Decimal("0")
        assert summary.cmhc == CMHCResult()
        assert "Purchase price must be greater than 0." in summary.validation_messages
        assert "APR must be between 0% and 25%." in summary.validation_messages
        assert summary.warnings == []


class TestSourceUsage:
    async def test_remote_results_used(self, canonical_inputs, canonical_cmhc):
        source = AsyncMock()
        source.get_land_transfer_tax.return_value = LandTransferTaxResult(
            purchase_price=Decimal("500000"), total=Decimal("1000.00")
        )
        source.get_cmhc_pst.return_value = canonical_cmhc
        summary = await PurchaseCalculator(ltt_source=source, cmhc_source=source).calculate(canonical_inputs)
        # 25,000 + 500 + 1,500 + 1,000 + 1,520 - 10,000
        assert summary.total_cash_at_closing == Decimal("19520.00")
        source.get_land_transfer_tax.assert_awaited_once()
        assert source.get_land_transfer_tax.await_args.kwargs["is_toronto_property"] is True
        source.get_cmhc_pst.assert_awaited_once_with(
            Decimal("500000"), Decimal("25000"), Province.ON
        )

    async def test_no_lookups_for_invalid_price(self):
        source = AsyncMock()
        await PurchaseCalculator(ltt_source=source, cmhc_source=source).calculate(
            PurchaseInputs(purchase_price=Decimal("0"))
        )
        source.get_land_transfer_tax.assert_not_awaited()
        source.get_cmhc_pst.assert_not_awaited()

    async def test_no_cmhc_lookup_without_insurance(self, canonical_inputs):
        source = AsyncMock()
        source.get_land_transfer_tax.return_value = LandTransferTaxResult(purchase_price=Decimal("500000"))
        inputs = replace(canonical_inputs, down_payment=Decimal("100000"))
        summary = await PurchaseCalculator(ltt_source=source, cmhc_source=source).calculate(inputs)
        source.get_cmhc_pst.assert_not_awaited()
        assert summary.cmhc_applies is False
        assert summary.cmhc.premium == Decimal("0")
        assert summary.cmhc.pst == Decimal("0")

    async def test_toronto_flag_sent_only_for_ontario(self, canonical_inputs):
        source = AsyncMock()
        source.get_land_transfer_tax.return_value = LandTransferTaxResult(purchase_price=Decimal("500000"))
        source.get_cmhc_pst.return_value = CMHCResult()
        inputs = replace(canonical_inputs, province=Province.SK)
        await PurchaseCalculator(ltt_source=source, cmhc_source=source).calculate(inputs)
        assert source.get_land_transfer_tax.await_args.kwargs["is_toronto_property"] is False


class TestFallbacks:
    async def test_cmhc_pst_falls_back_to_province_rate(self, canonical_inputs, failing_source):
        calculator = PurchaseCalculator(cmhc_source=failing_source)
        summary = await calculator.calculate(canonical_inputs)
        assert summary.cmhc.pst == summary.cmhc.premium * Decimal("0.08")
        assert summary.cmhc.pst == Decimal("1520.00")
        assert summary.warnings == [CMHC_FALLBACK_WARNING]
        assert summary.validation_messages == []

    async def test_cmhc_fallback_quebec(self, canonical_inputs, failing_source):
        inputs = replace(canonical_inputs, province=Province.QC)
        summary = await PurchaseCalculator(cmhc_source=failing_source).calculate(inputs)
        assert summary.cmhc.pst == Decimal("1710.00")

    async def test_ltt_falls_back_to_local_engine(self, canonical_inputs, failing_source):
        calculator = PurchaseCalculator(ltt_source=failing_source)
        summary = await calculator.calculate(canonical_inputs)
        assert summary.land_transfer_tax.total == Decimal("12950.00")
        assert summary.warnings == [LTT_FALLBACK_WARNING]

    async def test_both_sources_down(self, canonical_inputs, failing_source):
        calculator = PurchaseCalculator(ltt_source=failing_source, cmhc_source=failing_source)
        summary = await calculator.calculate(canonical_inputs)
        assert summary.warnings == [LTT_FALLBACK_WARNING, CMHC_FALLBACK_WARNING]
        assert summary.total_cash_at_closing == Decimal("31470.00")

    async def test_fallback_idempotent(self, canonical_inputs, failing_source):
        calculator = PurchaseCalculator(ltt_source=failing_source, cmhc_source=failing_source)
        assert await calculator.calculate(canonical_inputs) == await calculator.calculate(canonical_inputs)


class TestMarketRate:
    async def test_market_rate_replaces_apr(self, canonical_inputs):
        rate_source = AsyncMock()
        rate_source.get_five_year_fixed.return_value = MarketRate(
            apr_percent=Decimal("4.5"), source="Bank of Canada (Valet)", as_of=date(2026, 10, 14)
        )
        calculator = PurchaseCalculator(rate_source=rate_source)
        with_market = await calculator.calculate(canonical_inputs, use_market_rate=True)
        entered = await calculator.calculate(replace(canonical_inputs, apr_percent=Decimal("4.5")))
        assert with_market.monthly_mortgage_payment == entered.monthly_mortgage_payment
        assert with_market.warnings == []

    async def test_market_rate_not_fetched_unless_asked(self, canonical_inputs):
        rate_source = AsyncMock()
        await PurchaseCalculator(rate_source=rate_source).calculate(canonical_inputs)
        rate_source.get_five_year_fixed.assert_not_awaited()

    async def test_fallback_rate_warns(self, canonical_inputs):
        rate_source = AsyncMock()
        rate_source.get_five_year_fixed.return_value = MarketRate(
            apr_percent=Decimal("5.0"), source="Fallback", as_of=date(2026, 10, 19), is_fallback=True
        )
        summary = await PurchaseCalculator(rate_source=rate_source).calculate(
            canonical_inputs, use_market_rate=True
        )
        assert summary.warnings == ["Could not retrieve market rate; using default 5.0% APR."]

    async def test_rate_source_error_keeps_entered_apr(self, canonical_inputs):
        rate_source = AsyncMock()
        rate_source.get_five_year_fixed.side_effect = RuntimeError("boom")
        summary = await PurchaseCalculator(rate_source=rate_source).calculate(
            canonical_inputs, use_market_rate=True
        )
        assert summary.monthly_mortgage_payment == Decimal("2873.13")
        assert summary.warnings == ["Could not retrieve market rate; using entered value."]

    async def test_out_of_range_market_rate_ignored(self, canonical_inputs):
        rate_source = AsyncMock()
        rate_source.get_five_year_fixed.return_value = MarketRate(
            apr_percent=Decimal("30"), source="Bank of Canada (Valet)", as_of=date(2026, 10, 14)
        )
        summary = await PurchaseCalculator(rate_source=rate_source).calculate(
            canonical_inputs, use_market_rate=True
        )
        assert summary.monthly_mortgage_payment == Decimal("2873.13")


class TestSourceProtocols:
    def test_local_and_remote_sources_satisfy_protocols(self):
        for source in (LocalTaxService(), TaxServiceClient(base_url="http://tax.test")):
            assert isinstance(source, LandTransferTaxSource)
            assert isinstance(source, CMHCTaxSource)
        assert isinstance(FiveYearFixedRateSource(), MarketRateSource)
