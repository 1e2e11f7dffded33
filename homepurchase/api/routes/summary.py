"""Purchase summary route: the primary API entry point."""

from fastapi import APIRouter, Depends

from homepurchase.api.deps import get_calculator
from homepurchase.api.routes.tax import cmhc_to_response, ltt_to_response
from homepurchase.api.schemas import SummaryRequest, SummaryResponse
from homepurchase.data.calculator import PurchaseCalculator
from homepurchase.models.purchase import PurchaseInputs

router = APIRouter(prefix="/api", tags=["summary"])


def _build_inputs(req: SummaryRequest) -> PurchaseInputs:
    return PurchaseInputs(**req.model_dump(exclude={"use_market_rate"}))


@router.post("/summary", response_model=SummaryResponse)
async def purchase_summary(
    req: SummaryRequest,
    calculator: PurchaseCalculator = Depends(get_calculator),
):
    """Cash needed at closing and monthly carrying cost.

    Validation problems come back in validationMessages; degraded lookups in warnings.
    """
    summary = await calculator.calculate(_build_inputs(req), use_market_rate=req.use_market_rate)
    return SummaryResponse(
        mortgage_principal=summary.mortgage_principal,
        monthly_mortgage_payment=summary.monthly_mortgage_payment,
        total_cash_at_closing=summary.total_cash_at_closing,
        total_monthly_carrying_cost=summary.total_monthly_carrying_cost,
        cmhc_applies=summary.cmhc_applies,
        min_down_payment=summary.min_down_payment,
        financed_premium=summary.financed_premium,
        premium_at_closing=summary.premium_at_closing,
        balance_of_down_payment=summary.balance_of_down_payment,
        monthly_property_tax=summary.monthly_property_tax,
        land_transfer_tax=ltt_to_response(summary.land_transfer_tax),
        cmhc=cmhc_to_response(summary.cmhc),
        validation_messages=summary.validation_messages,
        warnings=summary.warnings,
    )
