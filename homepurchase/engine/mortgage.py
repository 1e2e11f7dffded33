"""Canadian mortgage payment.

Fixed-rate Canadian mortgages compound semi-annually (Interest Act), so the
quoted APR is converted to an effective monthly rate before amortizing.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

_SEMI_ANNUAL_TO_MONTHLY = Decimal(2) / Decimal(12)


def payment_count(amortization_years: Decimal) -> int:
    """Number of monthly payments, at least 1."""
    n = int((Decimal(amortization_years) * 12).quantize(Decimal("1"), ROUND_HALF_UP))
    return max(1, n)


def effective_monthly_rate(apr_percent: Decimal) -> Decimal:
    """(1 + apr/2)^(2/12) - 1, with negative APRs treated as 0."""
    nominal = max(Decimal("0"), Decimal(apr_percent)) / 100
    if nominal == 0:
        return Decimal("0")
    return (1 + nominal / 2) ** _SEMI_ANNUAL_TO_MONTHLY - 1


def monthly_payment(
    principal: Decimal,
    apr_percent: Decimal,
    amortization_years: Decimal,
) -> Decimal:
    """Level monthly payment. Unrounded; round at the display boundary."""
    n = payment_count(amortization_years)
    r = effective_monthly_rate(apr_percent)
    if r == 0:
        return principal / n
    # M = P * r / (1 - (1+r)^-n)
    return principal * r / (1 - (1 + r) ** -n)
