"""Purchase summary: validation, CMHC gating, mortgage principal and totals.

Pure functions: takes the already-resolved LTT and CMHC results, so it never
touches the network. The async PurchaseCalculator resolves those and calls in here.
"""

from dataclasses import replace
from decimal import Decimal

from homepurchase.engine.brackets import round_currency
from homepurchase.engine.cmhc import cmhc_applies, min_down_payment
from homepurchase.engine.mortgage import monthly_payment
from homepurchase.models.purchase import CMHCHandling, PurchaseInputs
from homepurchase.models.results import CMHCResult, LandTransferTaxResult, PurchaseSummary

MAX_APR_PERCENT = Decimal("25")
MIN_AMORTIZATION_YEARS = Decimal("5")
MAX_AMORTIZATION_YEARS = Decimal("30")


def _cad(value: Decimal) -> str:
    return f"${round_currency(value):,.2f}"


def validate_inputs(inputs: PurchaseInputs) -> list[str]:
    """Return every validation problem, in form order. Empty list means valid."""
    messages: list[str] = []
    price = inputs.purchase_price

    if not price > 0:
        messages.append("Purchase price must be greater than 0.")
    if inputs.deposit < 0:
        messages.append("Deposit cannot be negative.")
    if inputs.deposit > price:
        messages.append("Deposit cannot exceed purchase price.")
    if inputs.down_payment < 0 or inputs.down_payment > price:
        messages.append("Down payment must be between 0 and purchase price.")
    if inputs.apr_percent < 0 or inputs.apr_percent > MAX_APR_PERCENT:
        messages.append("APR must be between 0% and 25%.")
    if not MIN_AMORTIZATION_YEARS <= inputs.amortization_years <= MAX_AMORTIZATION_YEARS:
        messages.append("Amortization must be between 5 and 30 years.")

    if price > 0:
        minimum = min_down_payment(price)
        if inputs.down_payment < minimum:
            messages.append(f"Down payment below Canadian minimum {_cad(minimum)} for this price.")

    return messages


def build_purchase_summary(
    inputs: PurchaseInputs,
    land_transfer_tax: LandTransferTaxResult,
    cmhc: CMHCResult,
    warnings: list[str] | None = None,
) -> PurchaseSummary:
    """Combine LTT and CMHC results into cash-at-closing and monthly figures."""
    price = inputs.purchase_price
    applies = cmhc_applies(price, inputs.down_payment)

    if not applies:
        # No insurance required: LTV and rate stay for reference, nothing is owed
        cmhc = replace(cmhc, premium=Decimal("0"), pst=Decimal("0"))

    premium = cmhc.premium if cmhc.insurable else Decimal("0")
    pst = cmhc.pst

    financed_premium = Decimal("0")
    premium_at_closing = Decimal("0")
    if premium > 0:
        if inputs.cmhc_handling is CMHCHandling.FINANCE:
            financed_premium = premium
        else:
            premium_at_closing = premium

    principal = inputs.base_mortgage + financed_premium
    payment = monthly_payment(principal, inputs.apr_percent, inputs.amortization_years)

    cash_at_closing = (
        inputs.down_payment
        + inputs.inspection_fee
        + inputs.legal_fees
        + land_transfer_tax.total
        + pst
        + premium_at_closing
        - inputs.deposit
    )

    monthly_property_tax = inputs.annual_property_tax / 12
    total_monthly = (
        payment
        + monthly_property_tax
        + inputs.monthly_maintenance
        + inputs.monthly_utilities
        + inputs.monthly_rental_offset
        + inputs.monthly_insurance
    )

    return PurchaseSummary(
        land_transfer_tax=land_transfer_tax,
        cmhc=cmhc,
        cmhc_applies=applies,
        min_down_payment=round_currency(min_down_payment(price)) if price > 0 else Decimal("0.00"),
        financed_premium=round_currency(financed_premium),
        premium_at_closing=round_currency(premium_at_closing),
        mortgage_principal=round_currency(principal),
        monthly_mortgage_payment=round_currency(payment),
        balance_of_down_payment=round_currency(max(Decimal("0"), inputs.down_payment - inputs.deposit)),
        total_cash_at_closing=round_currency(cash_at_closing),
        monthly_property_tax=round_currency(monthly_property_tax),
        total_monthly_carrying_cost=round_currency(total_monthly),
        validation_messages=validate_inputs(inputs),
        warnings=list(warnings or []),
    )
