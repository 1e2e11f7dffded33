"""Purchase calculator: resolves LTT, CMHC PST and (optionally) the market APR, then summarizes.

Flow: validate → [LTT lookup | CMHC PST lookup | market rate] in parallel → build_purchase_summary.
Each lookup degrades independently to a local value plus a warning.
"""

import asyncio
import logging
from dataclasses import replace
from decimal import Decimal

from homepurchase.data.base import CMHCTaxSource, LandTransferTaxSource, MarketRateSource
from homepurchase.data.local import LocalTaxService
from homepurchase.engine.cmhc import cmhc_applies, compute_cmhc_premium, local_pst
from homepurchase.engine.land_transfer import compute_land_transfer_tax
from homepurchase.engine.summary import MAX_APR_PERCENT, build_purchase_summary
from homepurchase.models.purchase import PurchaseInputs
from homepurchase.models.results import CMHCResult, LandTransferTaxResult, MarketRate, PurchaseSummary

logger = logging.getLogger(__name__)

LTT_FALLBACK_WARNING = "Could not retrieve land transfer tax from the tax service; using local calculation."
CMHC_FALLBACK_WARNING = "Could not retrieve CMHC PST from the tax service; using local province rates."


def _local_land_transfer_tax(inputs: PurchaseInputs) -> LandTransferTaxResult:
    return compute_land_transfer_tax(
        inputs.purchase_price,
        is_toronto_property=inputs.in_toronto,
        first_time_buyer=inputs.first_time_buyer,
        is_non_resident=inputs.is_non_resident,
        property_type=inputs.property_type,
        dwelling_type=inputs.dwelling_type,
    )


def _local_cmhc(inputs: PurchaseInputs) -> CMHCResult:
    result = compute_cmhc_premium(inputs.purchase_price, inputs.down_payment, inputs.province)
    return replace(result, pst=local_pst(result.premium, inputs.province))


class PurchaseCalculator:
    def __init__(
        self,
        ltt_source: LandTransferTaxSource | None = None,
        cmhc_source: CMHCTaxSource | None = None,
        rate_source: MarketRateSource | None = None,
    ):
        local = LocalTaxService()
        self.ltt_source = ltt_source or local
        self.cmhc_source = cmhc_source or local
        self.rate_source = rate_source

    async def _land_transfer_tax(self, inputs: PurchaseInputs) -> LandTransferTaxResult | None:
        if inputs.purchase_price <= 0:
            return None
        return await self.ltt_source.get_land_transfer_tax(
            purchase_price=inputs.purchase_price,
            is_toronto_property=inputs.in_toronto,
            first_time_buyer=inputs.first_time_buyer,
            is_non_resident=inputs.is_non_resident,
            property_type=inputs.property_type,
            dwelling_type=inputs.dwelling_type,
        )

    async def _cmhc(self, inputs: PurchaseInputs) -> CMHCResult | None:
        price, down = inputs.purchase_price, inputs.down_payment
        if price <= 0 or down < 0 or down > price:
            return None
        if not cmhc_applies(price, down):
            # Not needed for the totals, so no lookup
            return compute_cmhc_premium(price, down, inputs.province)
        return await self.cmhc_source.get_cmhc_pst(price, down, inputs.province)

    async def _market_rate(self, use_market_rate: bool) -> MarketRate | None:
        if not use_market_rate or self.rate_source is None:
            return None
        return await self.rate_source.get_five_year_fixed()

    async def calculate(self, inputs: PurchaseInputs, use_market_rate: bool = False) -> PurchaseSummary:
        """Full closing-cost and carrying-cost summary for one purchase.

        Args:
            inputs: Purchase inputs
            use_market_rate: Replace the entered APR with the market 5-year fixed rate
        """
        ltt_result, cmhc_result, rate_result = await asyncio.gather(
            self._land_transfer_tax(inputs),
            self._cmhc(inputs),
            self._market_rate(use_market_rate),
            return_exceptions=True,
        )

        warnings: list[str] = []

        # Normalize failed lookups to local fallbacks
        if isinstance(ltt_result, Exception):
            logger.warning("Land transfer tax lookup failed: %s", ltt_result)
            warnings.append(LTT_FALLBACK_WARNING)
            ltt_result = _local_land_transfer_tax(inputs)
        if ltt_result is None:
            ltt_result = LandTransferTaxResult(purchase_price=inputs.purchase_price)

        if isinstance(cmhc_result, Exception):
            logger.warning("CMHC PST lookup failed: %s", cmhc_result)
            warnings.append(CMHC_FALLBACK_WARNING)
            cmhc_result = _local_cmhc(inputs)
        if cmhc_result is None:
            cmhc_result = CMHCResult()

        if isinstance(rate_result, Exception):
            logger.warning("Market rate lookup failed: %s", rate_result)
            warnings.append("Could not retrieve market rate; using entered value.")
        elif isinstance(rate_result, MarketRate):
            if rate_result.is_fallback:
                warnings.append(
                    f"Could not retrieve market rate; using default {rate_result.apr_percent}% APR."
                )
            if Decimal("0") < rate_result.apr_percent < MAX_APR_PERCENT:
                inputs = replace(inputs, apr_percent=rate_result.apr_percent)

        return build_purchase_summary(inputs, ltt_result, cmhc_result, warnings)
