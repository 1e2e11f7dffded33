"""CMA proxy routes. Payloads are forwarded as-is."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from homepurchase.api.deps import get_cma_client
from homepurchase.api.schemas import CMAResponse
from homepurchase.data.cma import CMAClient

router = APIRouter(prefix="/api/cma", tags=["cma"])


@router.post("/land-transfer-tax", response_model=CMAResponse)
async def cma_land_transfer_tax(
    payload: dict[str, Any] | None = Body(None),
    client: CMAClient = Depends(get_cma_client),
):
    # e.g. {purchasePrice, propertyType, province: "ON", municipality: "Toronto", firstTimeBuyer}
    return await client.proxy("land-transfer-tax", payload)


@router.post("/cmhc-insurance-tax", response_model=CMAResponse)
async def cma_cmhc_insurance_tax(
    payload: dict[str, Any] | None = Body(None),
    client: CMAClient = Depends(get_cma_client),
):
    # e.g. {purchasePrice, downPayment, province: "ON"}
    return await client.proxy("cmhc-insurance-tax", payload)
