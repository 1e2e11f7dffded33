from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class LandTransferTaxResult:
    purchase_price: Decimal
    dwelling_units: int = 1

    # Provincial (Ontario)
    provincial_before_rebate: Decimal = Decimal("0")
    provincial_rebate_applied: Decimal = Decimal("0")
    provincial: Decimal = Decimal("0")  # After rebate

    # Municipal (Toronto only)
    municipal_before_rebate: Decimal = Decimal("0")
    municipal_rebate_applied: Decimal = Decimal("0")
    municipal: Decimal = Decimal("0")  # After rebate

    # Non-Resident Speculation Tax
    nrst: Decimal = Decimal("0")

    total: Decimal = Decimal("0")


@dataclass(frozen=True)
class CMHCResult:
    ltv: Decimal = Decimal("0")  # 0..1, rounded to 4 places
    insurable: bool = True  # False when LTV > 95%
    premium_rate: Decimal | None = None  # Fraction; None when uninsurable
    premium: Decimal = Decimal("0")
    pst_rate: Decimal = Decimal("0")  # Fraction
    pst: Decimal = Decimal("0")


@dataclass(frozen=True)
class MarketRate:
    apr_percent: Decimal
    source: str
    as_of: date
    is_fallback: bool = False


@dataclass(frozen=True)
class PurchaseSummary:
    land_transfer_tax: LandTransferTaxResult
    cmhc: CMHCResult

    # Mortgage
    cmhc_applies: bool = False
    min_down_payment: Decimal = Decimal("0")
    financed_premium: Decimal = Decimal("0")
    premium_at_closing: Decimal = Decimal("0")
    mortgage_principal: Decimal = Decimal("0")
    monthly_mortgage_payment: Decimal = Decimal("0")

    # Closing
    balance_of_down_payment: Decimal = Decimal("0")  # Down payment still owed after deposit
    total_cash_at_closing: Decimal = Decimal("0")

    # Monthly
    monthly_property_tax: Decimal = Decimal("0")
    total_monthly_carrying_cost: Decimal = Decimal("0")

    # Messages: validation problems are kept apart from degraded-source warnings
    validation_messages: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.validation_messages
