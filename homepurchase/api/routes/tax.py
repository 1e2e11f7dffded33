"""Jurisdiction tax routes: land transfer tax and CMHC premium PST."""

from decimal import Decimal

from fastapi import APIRouter

from homepurchase.api.schemas import (
    CMHCPSTRequest,
    CMHCPSTResponse,
    LandTransferTaxRequest,
    LandTransferTaxResponse,
)
from homepurchase.engine.cmhc import compute_cmhc_premium
from homepurchase.engine.land_transfer import compute_land_transfer_tax
from homepurchase.models.results import CMHCResult, LandTransferTaxResult

router = APIRouter(prefix="/api/tax", tags=["tax"])

PERCENT_PLACES = Decimal("0.01")


def ltt_to_response(result: LandTransferTaxResult) -> LandTransferTaxResponse:
    return LandTransferTaxResponse(
        purchase_price=result.purchase_price,
        dwelling_units=result.dwelling_units,
        provincial_before_rebate=result.provincial_before_rebate,
        provincial_rebate_applied=result.provincial_rebate_applied,
        provincial=result.provincial,
        municipal_before_rebate=result.municipal_before_rebate,
        municipal_rebate_applied=result.municipal_rebate_applied,
        municipal=result.municipal,
        nrst=result.nrst,
        total=result.total,
    )


def cmhc_to_response(result: CMHCResult) -> CMHCPSTResponse:
    """Rates go out as percentages."""
    premium_rate = None
    if result.premium_rate is not None:
        premium_rate = (result.premium_rate * 100).quantize(PERCENT_PLACES)
    return CMHCPSTResponse(
        ltv=result.ltv,
        premium_rate=premium_rate,
        premium=result.premium,
        pst_rate=(result.pst_rate * 100).quantize(PERCENT_PLACES),
        pst=result.pst,
    )


@router.post("/land-transfer", response_model=LandTransferTaxResponse)
async def land_transfer(req: LandTransferTaxRequest):
    """Ontario provincial LTT, Toronto municipal LTT, first-time buyer rebates and NRST."""
    result = compute_land_transfer_tax(
        req.purchase_price,
        is_toronto_property=req.is_toronto,
        first_time_buyer=req.first_time_buyer,
        is_non_resident=req.is_non_resident,
        property_type=req.property_type,
        dwelling_type=req.dwelling_type,
    )
    return ltt_to_response(result)


@router.post("/cmhc-pst", response_model=CMHCPSTResponse)
async def cmhc_pst(req: CMHCPSTRequest):
    """CMHC premium and the provincial sales tax on it.

    Request: {"purchasePrice": 500000, "downPayment": 25000, "province": "ON"}
    Rates are percentages. Above 95% LTV the loan is uninsurable: premiumRate is null
    (not 0) and premium and pst are 0.
    """
    result = compute_cmhc_premium(req.purchase_price, req.down_payment, req.province)
    return cmhc_to_response(result)
