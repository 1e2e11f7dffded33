"""Canonical test fixtures used across engine, data and API tests.

Fixture: $500K Toronto detached house, 5% down ($25K), $10K deposit,
5% APR over 25 years, CMHC premium financed.
"""

from decimal import Decimal

import pytest

from homepurchase.engine.cmhc import compute_cmhc_premium
from homepurchase.engine.land_transfer import compute_land_transfer_tax
from homepurchase.models.purchase import (
    CMHCHandling,
    DwellingType,
    PropertyType,
    Province,
    PurchaseInputs,
)


@pytest.fixture
def canonical_inputs() -> PurchaseInputs:
    """$500K Toronto purchase at the statutory minimum down payment."""
    return PurchaseInputs(
        purchase_price=Decimal("500000"),
        down_payment=Decimal("25000"),
        deposit=Decimal("10000"),
        apr_percent=Decimal("5"),
        amortization_years=Decimal("25"),
        province=Province.ON,
        is_toronto_property=True,
        first_time_buyer=False,
        is_non_resident=False,
        property_type=PropertyType.DETACHED,
        dwelling_type=DwellingType.SINGLE_FAMILY,
        cmhc_handling=CMHCHandling.FINANCE,
        inspection_fee=Decimal("500"),
        legal_fees=Decimal("1500"),
        annual_property_tax=Decimal("6000"),
        monthly_maintenance=Decimal("300"),
        monthly_utilities=Decimal("200"),
        monthly_rental_offset=Decimal("0"),
        monthly_insurance=Decimal("100"),
    )


@pytest.fixture
def canonical_ltt(canonical_inputs):
    """Provincial 6,475 + Toronto 6,475 = 12,950."""
    return compute_land_transfer_tax(
        canonical_inputs.purchase_price,
        is_toronto_property=True,
        property_type=canonical_inputs.property_type,
        dwelling_type=canonical_inputs.dwelling_type,
    )


@pytest.fixture
def canonical_cmhc(canonical_inputs):
    """95% LTV → 4.00% premium on $475K = $19,000; 8% Ontario PST = $1,520."""
    return compute_cmhc_premium(
        canonical_inputs.purchase_price,
        canonical_inputs.down_payment,
        canonical_inputs.province,
    )
