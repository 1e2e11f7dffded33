"""CMHC mortgage default insurance: premium tiers, PST on premium, minimum down payment.

The premium engine is pure math on LTV. Whether a purchase needs insurance at
all (price cap, 20% down, statutory minimum) is decided by cmhc_applies(),
which the aggregator calls before using the premium.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from homepurchase.engine.brackets import round_currency
from homepurchase.errors import InvalidInput
from homepurchase.models.purchase import Province
from homepurchase.models.results import CMHCResult

FOUR_PLACES = Decimal("0.0001")

_PROVINCE_ALIASES: dict[str, Province] = {
    "ON": Province.ON,
    "ONTARIO": Province.ON,
    "QC": Province.QC,
    "QUEBEC": Province.QC,
    "SK": Province.SK,
    "SASKATCHEWAN": Province.SK,
    "OTHER": Province.OTHER,
}


@dataclass(frozen=True)
class CMHCRules:
    # (max LTV inclusive, premium rate)
    premium_tiers: tuple[tuple[Decimal, Decimal], ...] = (
        (Decimal("0.65"), Decimal("0.006")),
        (Decimal("0.75"), Decimal("0.017")),
        (Decimal("0.80"), Decimal("0.024")),
        (Decimal("0.85"), Decimal("0.028")),
        (Decimal("0.90"), Decimal("0.031")),
        (Decimal("0.95"), Decimal("0.040")),
    )
    pst_rates: dict[Province, Decimal] = field(default_factory=lambda: {
        Province.ON: Decimal("0.08"),
        Province.QC: Decimal("0.09"),
        Province.SK: Decimal("0.06"),
    })

    # Insured mortgages: purchase price cap and the down payment that ends the requirement
    max_insurable_price: Decimal = Decimal("1000000")
    uninsured_down_pct: Decimal = Decimal("0.20")

    # Statutory minimum down payment
    min_down_threshold: Decimal = Decimal("500000")
    min_down_low_pct: Decimal = Decimal("0.05")  # On the first $500K
    min_down_high_pct: Decimal = Decimal("0.10")  # On the remainder
    min_down_jumbo_price: Decimal = Decimal("1000000")
    min_down_jumbo_pct: Decimal = Decimal("0.20")


CMHC_RULES = CMHCRules()


def normalize_province(raw: Province | str | None) -> Province:
    """Accept a Province, a code or a full name; anything unknown is OTHER."""
    if isinstance(raw, Province):
        return raw
    key = str(raw or "ON").strip().upper()
    return _PROVINCE_ALIASES.get(key, Province.OTHER)


def min_down_payment(purchase_price: Decimal, rules: CMHCRules = CMHC_RULES) -> Decimal:
    """Canadian statutory minimum down payment for a purchase price."""
    if purchase_price >= rules.min_down_jumbo_price:
        return purchase_price * rules.min_down_jumbo_pct
    if purchase_price <= rules.min_down_threshold:
        return purchase_price * rules.min_down_low_pct
    return (
        rules.min_down_threshold * rules.min_down_low_pct
        + (purchase_price - rules.min_down_threshold) * rules.min_down_high_pct
    )


def cmhc_premium_rate(ltv: Decimal, rules: CMHCRules = CMHC_RULES) -> Decimal | None:
    """Premium rate for an LTV; None when the loan is uninsurable (LTV > 95%)."""
    for max_ltv, rate in rules.premium_tiers:
        if ltv <= max_ltv:
            return rate
    return None


def pst_rate_for(province: Province | str | None, rules: CMHCRules = CMHC_RULES) -> Decimal:
    return rules.pst_rates.get(normalize_province(province), Decimal("0"))


def local_pst(premium: Decimal, province: Province | str | None, rules: CMHCRules = CMHC_RULES) -> Decimal:
    """PST on a premium from the local province table."""
    return round_currency(premium * pst_rate_for(province, rules))


def cmhc_applies(
    purchase_price: Decimal,
    down_payment: Decimal,
    rules: CMHCRules = CMHC_RULES,
) -> bool:
    """Whether an insured (CMHC) mortgage is required and permitted.

    Requires price <= $1M, down payment under 20%, and at least the statutory minimum.
    """
    if purchase_price <= 0:
        return False
    if purchase_price > rules.max_insurable_price:
        return False
    if down_payment >= purchase_price * rules.uninsured_down_pct:
        return False
    return down_payment >= min_down_payment(purchase_price, rules)


def compute_cmhc_premium(
    purchase_price: Decimal,
    down_payment: Decimal,
    province: Province | str | None = Province.ON,
    rules: CMHCRules = CMHC_RULES,
) -> CMHCResult:
    """LTV, premium and PST for a purchase.

    Raises InvalidInput if purchase_price <= 0 or down_payment is outside [0, price].
    """
    if purchase_price <= 0:
        raise InvalidInput("purchasePrice must be > 0")
    if down_payment < 0 or down_payment > purchase_price:
        raise InvalidInput("downPayment out of range")

    mortgage = max(Decimal("0"), purchase_price - down_payment)
    ltv = mortgage / purchase_price
    rate = cmhc_premium_rate(ltv, rules)

    premium = mortgage * rate if rate is not None else Decimal("0")
    pst_rate = pst_rate_for(province, rules)

    return CMHCResult(
        ltv=ltv.quantize(FOUR_PLACES, ROUND_HALF_UP),
        insurable=rate is not None,
        premium_rate=rate,
        premium=round_currency(premium),
        pst_rate=pst_rate,
        pst=round_currency(premium * pst_rate),
    )
