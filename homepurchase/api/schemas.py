"""Pydantic schemas for API request/response models.

Wire format is camelCase; Python attributes stay snake_case.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from homepurchase.models.purchase import CMHCHandling, DwellingType, PropertyType, Province


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Amounts and rates go out as JSON numbers; requests accept numbers or strings
Number = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# ---- Request schemas ----

class LandTransferTaxRequest(CamelModel):
    purchase_price: Decimal = Decimal("0")
    is_toronto: bool = True
    first_time_buyer: bool = False
    is_non_resident: bool = False
    property_type: PropertyType = PropertyType.DETACHED
    dwelling_type: str = Field(DwellingType.SINGLE_FAMILY.value, description="Only used for Detached / Semi-Detached")


class CMHCPSTRequest(CamelModel):
    purchase_price: Decimal = Decimal("0")
    down_payment: Decimal = Decimal("0")
    province: str = Field("ON", description="Code or name: ON, QC, SK, OTHER")


class SummaryRequest(CamelModel):
    purchase_price: Decimal
    down_payment: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    apr_percent: Decimal = Decimal("5.0")
    amortization_years: Decimal = Decimal("25")
    province: Province = Province.ON
    is_toronto_property: bool = True
    first_time_buyer: bool = False
    is_non_resident: bool = False
    property_type: PropertyType = PropertyType.DETACHED
    dwelling_type: DwellingType = DwellingType.SINGLE_FAMILY
    cmhc_handling: CMHCHandling = CMHCHandling.FINANCE
    inspection_fee: Decimal = Decimal("0")
    legal_fees: Decimal = Decimal("0")
    annual_property_tax: Decimal = Decimal("0")
    monthly_maintenance: Decimal = Decimal("0")
    monthly_utilities: Decimal = Decimal("0")
    monthly_rental_offset: Decimal = Decimal("0")
    monthly_insurance: Decimal = Decimal("0")

    use_market_rate: bool = False


# ---- Response schemas ----

class LandTransferTaxResponse(CamelModel):
    purchase_price: Number
    dwelling_units: int
    provincial_before_rebate: Number
    provincial_rebate_applied: Number
    provincial: Number
    municipal_before_rebate: Number
    municipal_rebate_applied: Number
    municipal: Number
    nrst: Number
    total: Number


class CMHCPSTResponse(CamelModel):
    ltv: Number
    premium_rate: Number | None = Field(None, description="Percent; null when LTV > 95%")
    premium: Number
    pst_rate: Number = Field(..., description="Percent")
    pst: Number


class MarketRateResponse(CamelModel):
    currency: str = "CAD"
    apr_percent: Number
    source: str
    as_of_iso: str = Field(..., alias="asOfISO")


class CMAResponse(CamelModel):
    amount: Number
    source: str


class SummaryResponse(CamelModel):
    mortgage_principal: Number
    monthly_mortgage_payment: Number
    total_cash_at_closing: Number
    total_monthly_carrying_cost: Number

    cmhc_applies: bool
    min_down_payment: Number
    financed_premium: Number
    premium_at_closing: Number
    balance_of_down_payment: Number
    monthly_property_tax: Number

    land_transfer_tax: LandTransferTaxResponse
    cmhc: CMHCPSTResponse

    validation_messages: list[str] = []
    warnings: list[str] = []
