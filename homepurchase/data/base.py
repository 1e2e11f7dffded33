"""Protocol definitions for external lookups.

Each protocol defines the interface that the tax service client, the in-process
engines and the market-rate source satisfy.
"""

from decimal import Decimal
from typing import Protocol, runtime_checkable

from homepurchase.models.purchase import DwellingType, PropertyType, Province
from homepurchase.models.results import CMHCResult, LandTransferTaxResult, MarketRate


@runtime_checkable
class LandTransferTaxSource(Protocol):
    async def get_land_transfer_tax(
        self,
        purchase_price: Decimal,
        is_toronto_property: bool,
        first_time_buyer: bool,
        is_non_resident: bool,
        property_type: PropertyType,
        dwelling_type: DwellingType,
    ) -> LandTransferTaxResult:
        """Provincial + municipal LTT with rebates and NRST."""
        ...


@runtime_checkable
class CMHCTaxSource(Protocol):
    async def get_cmhc_pst(
        self,
        purchase_price: Decimal,
        down_payment: Decimal,
        province: Province,
    ) -> CMHCResult:
        """CMHC premium and the provincial sales tax on it."""
        ...


@runtime_checkable
class MarketRateSource(Protocol):
    async def get_five_year_fixed(self) -> MarketRate:
        """Current 5-year fixed APR; never raises, falls back to a configured default."""
        ...
