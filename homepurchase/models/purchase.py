from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Province(Enum):
    ON = "ON"
    QC = "QC"
    SK = "SK"
    OTHER = "OTHER"


class PropertyType(Enum):
    DETACHED = "Detached"
    SEMI_DETACHED = "Semi-Detached"
    TOWNHOUSE = "Town-house"
    CONDOMINIUM = "Condominium"

    @property
    def uses_dwelling_type(self) -> bool:
        """Only freehold houses are split into dwelling units."""
        return self in (PropertyType.DETACHED, PropertyType.SEMI_DETACHED)


class DwellingType(Enum):
    SINGLE_FAMILY = "Single Family"
    DUPLEX = "Duplex"
    TRIPLEX = "Triplex"
    FOURPLEX = "Four-plex"
    MULTIPLEX = "Multiplex"


class CMHCHandling(Enum):
    FINANCE = "finance"  # Premium added to the mortgage principal
    UPFRONT = "upfront"  # Premium paid in cash at closing


@dataclass(frozen=True)
class PurchaseInputs:
    # Purchase
    purchase_price: Decimal
    down_payment: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")  # Already paid on offer; deducted from cash at closing

    # Financing
    apr_percent: Decimal = Decimal("5.0")  # Nominal, compounded semi-annually
    amortization_years: Decimal = Decimal("25")
    cmhc_handling: CMHCHandling = CMHCHandling.FINANCE

    # Jurisdiction / buyer
    province: Province = Province.ON
    is_toronto_property: bool = True  # Ignored outside Ontario
    first_time_buyer: bool = False
    is_non_resident: bool = False
    property_type: PropertyType = PropertyType.DETACHED
    dwelling_type: DwellingType = DwellingType.SINGLE_FAMILY

    # One-time closing costs
    inspection_fee: Decimal = Decimal("0")
    legal_fees: Decimal = Decimal("0")

    # Recurring
    annual_property_tax: Decimal = Decimal("0")
    monthly_maintenance: Decimal = Decimal("0")
    monthly_utilities: Decimal = Decimal("0")
    monthly_rental_offset: Decimal = Decimal("0")  # Signed; negative for rental income
    monthly_insurance: Decimal = Decimal("0")

    @property
    def base_mortgage(self) -> Decimal:
        return max(Decimal("0"), self.purchase_price - self.down_payment)

    @property
    def down_payment_pct(self) -> Decimal:
        if self.purchase_price <= 0:
            return Decimal("0")
        return self.down_payment / self.purchase_price * 100

    @property
    def in_toronto(self) -> bool:
        return self.province is Province.ON and self.is_toronto_property
