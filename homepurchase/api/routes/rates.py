"""Market rate routes."""

from fastapi import APIRouter, Depends

from homepurchase.api.deps import get_rate_source
from homepurchase.api.schemas import MarketRateResponse
from homepurchase.data.rates import FiveYearFixedRateSource

router = APIRouter(prefix="/api/rates", tags=["rates"])


@router.get("/5y-fixed", response_model=MarketRateResponse)
async def five_year_fixed(source: FiveYearFixedRateSource = Depends(get_rate_source)):
    """Current 5-year fixed APR, or the configured fallback."""
    rate = await source.get_five_year_fixed()
    return MarketRateResponse(
        apr_percent=rate.apr_percent,
        source=rate.source,
        as_of_iso=rate.as_of.isoformat(),
    )
