"""Ontario land transfer tax with the Toronto municipal add-on.

Provincial and municipal tax are marginal-bracket sums. First-time buyers get a
rebate on each, capped separately. Non-residents pay the flat NRST on top.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal

from homepurchase.engine.brackets import (
    BracketTable,
    build_bracket_table,
    compute_marginal_tax,
    round_currency,
)
from homepurchase.errors import InvalidInput
from homepurchase.models.purchase import DwellingType, PropertyType
from homepurchase.models.results import LandTransferTaxResult

# Units per dwelling type; drives the top brackets above $2M
DWELLING_UNITS: dict[str, int] = {
    DwellingType.SINGLE_FAMILY.value: 1,
    DwellingType.DUPLEX.value: 2,
    DwellingType.TRIPLEX.value: 3,
    "Tri-plex": 3,  # Alternate spelling seen on listings
    DwellingType.FOURPLEX.value: 4,
    DwellingType.MULTIPLEX.value: 5,
}

# Tiers shared by the provincial and Toronto tables up to $2M
_BASE_TIERS = (
    (55000, "0.005"),
    (250000, "0.01"),
    (400000, "0.015"),
    (2000000, "0.02"),
)


@dataclass(frozen=True)
class LandTransferRules:
    """Bracket tables, rebate caps and NRST rate for one jurisdiction-year."""
    provincial_one_two_units: BracketTable
    provincial_multi_unit: BracketTable
    municipal_one_two_units: BracketTable
    municipal_multi_unit: BracketTable
    provincial_rebate_cap: Decimal
    municipal_rebate_cap: Decimal
    nrst_rate: Decimal
    max_units_for_top_rates: int = 2


ONTARIO_TORONTO_RULES = LandTransferRules(
    provincial_one_two_units=build_bracket_table(*_BASE_TIERS, (None, "0.025")),
    # Above two units the 2.5% top rate for single-family residences does not apply
    provincial_multi_unit=build_bracket_table(*_BASE_TIERS, (None, "0.02")),
    municipal_one_two_units=build_bracket_table(
        *_BASE_TIERS,
        (3000000, "0.025"),
        (4000000, "0.035"),
        (5000000, "0.045"),
        (10000000, "0.055"),
        (20000000, "0.065"),
        (None, "0.075"),
    ),
    # Approximation: no authoritative multi-unit luxury brackets, so hold at 2.0% above $2M
    municipal_multi_unit=build_bracket_table(*_BASE_TIERS, (None, "0.02")),
    provincial_rebate_cap=Decimal("4000"),
    municipal_rebate_cap=Decimal("4475"),
    nrst_rate=Decimal("0.25"),
)


def dwelling_units(
    dwelling_type: DwellingType | str | None,
    property_type: PropertyType | None = None,
) -> int:
    """Number of dwelling units; 1 for unknown types or non-freehold property."""
    if property_type is not None and not property_type.uses_dwelling_type:
        return 1
    if isinstance(dwelling_type, DwellingType):
        dwelling_type = dwelling_type.value
    return DWELLING_UNITS.get(dwelling_type or "", 1)


def provincial_brackets(units: int, rules: LandTransferRules = ONTARIO_TORONTO_RULES) -> BracketTable:
    if units <= rules.max_units_for_top_rates:
        return rules.provincial_one_two_units
    return rules.provincial_multi_unit


def municipal_brackets(units: int, rules: LandTransferRules = ONTARIO_TORONTO_RULES) -> BracketTable:
    if units <= rules.max_units_for_top_rates:
        return rules.municipal_one_two_units
    return rules.municipal_multi_unit


def compute_land_transfer_tax(
    purchase_price: Decimal,
    is_toronto_property: bool = True,
    first_time_buyer: bool = False,
    is_non_resident: bool = False,
    property_type: PropertyType = PropertyType.DETACHED,
    dwelling_type: DwellingType | str | None = DwellingType.SINGLE_FAMILY,
    rules: LandTransferRules = ONTARIO_TORONTO_RULES,
) -> LandTransferTaxResult:
    """Compute provincial + municipal LTT, rebates, NRST and the total.

    Raises InvalidInput if purchase_price <= 0.
    """
    if purchase_price <= 0:
        raise InvalidInput("purchasePrice must be > 0")

    units = dwelling_units(dwelling_type, property_type)

    provincial_before = compute_marginal_tax(purchase_price, provincial_brackets(units, rules))
    municipal_before = Decimal("0")
    if is_toronto_property:
        municipal_before = compute_marginal_tax(purchase_price, municipal_brackets(units, rules))

    provincial_rebate = Decimal("0")
    municipal_rebate = Decimal("0")
    if first_time_buyer:
        provincial_rebate = min(provincial_before, rules.provincial_rebate_cap)
        if is_toronto_property:
            municipal_rebate = min(municipal_before, rules.municipal_rebate_cap)

    provincial = provincial_before - provincial_rebate
    municipal = municipal_before - municipal_rebate
    nrst = purchase_price * rules.nrst_rate if is_non_resident else Decimal("0")

    return LandTransferTaxResult(
        purchase_price=purchase_price,
        dwelling_units=units,
        provincial_before_rebate=round_currency(provincial_before),
        provincial_rebate_applied=round_currency(provincial_rebate),
        provincial=round_currency(provincial),
        municipal_before_rebate=round_currency(municipal_before),
        municipal_rebate_applied=round_currency(municipal_rebate),
        municipal=round_currency(municipal),
        nrst=round_currency(nrst),
        total=round_currency(provincial + municipal + nrst),
    )
