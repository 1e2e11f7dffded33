"""HTTP client for the jurisdiction tax service (/api/tax/*)."""

import logging
from decimal import Decimal, InvalidOperation

import httpx

from homepurchase.config import settings
from homepurchase.errors import ExternalSourceUnavailable
from homepurchase.models.purchase import DwellingType, PropertyType, Province
from homepurchase.models.results import CMHCResult, LandTransferTaxResult

logger = logging.getLogger(__name__)

MAX_INSURABLE_LTV = Decimal("0.95")


def _dec(data: dict, key: str) -> Decimal:
    return Decimal(str(data.get(key) or 0))


class TaxServiceClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.tax_service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.tax_service_timeout_seconds
        self._transport = transport

    async def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}/api/tax/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Tax service request failed for %s: %s", path, e)
            raise ExternalSourceUnavailable(f"Tax service unavailable: {path}") from e

    async def get_land_transfer_tax(
        self,
        purchase_price: Decimal,
        is_toronto_property: bool,
        first_time_buyer: bool,
        is_non_resident: bool,
        property_type: PropertyType,
        dwelling_type: DwellingType,
    ) -> LandTransferTaxResult:
        data = await self._post("land-transfer", {
            "purchasePrice": str(purchase_price),
            "isToronto": is_toronto_property,
            "firstTimeBuyer": first_time_buyer,
            "isNonResident": is_non_resident,
            "propertyType": property_type.value,
            "dwellingType": dwelling_type.value,
        })
        try:
            return LandTransferTaxResult(
                purchase_price=purchase_price,
                dwelling_units=int(data.get("dwellingUnits") or 1),
                provincial_before_rebate=_dec(data, "provincialBeforeRebate"),
                provincial_rebate_applied=_dec(data, "provincialRebateApplied"),
                provincial=_dec(data, "provincial"),
                municipal_before_rebate=_dec(data, "municipalBeforeRebate"),
                municipal_rebate_applied=_dec(data, "municipalRebateApplied"),
                municipal=_dec(data, "municipal"),
                nrst=_dec(data, "nrst"),
                total=Decimal(str(data["total"])),
            )
        except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Malformed land transfer tax response: %s", e)
            raise ExternalSourceUnavailable("Malformed land transfer tax response") from e

    async def get_cmhc_pst(
        self,
        purchase_price: Decimal,
        down_payment: Decimal,
        province: Province,
    ) -> CMHCResult:
        data = await self._post("cmhc-pst", {
            "purchasePrice": str(purchase_price),
            "downPayment": str(down_payment),
            "province": province.value,
        })
        try:
            ltv = Decimal(str(data["ltv"]))
            raw_rate = data.get("premiumRate")
            insurable = ltv <= MAX_INSURABLE_LTV
            return CMHCResult(
                ltv=ltv,
                insurable=insurable,
                # Rates travel as percentages
                premium_rate=Decimal(str(raw_rate)) / 100 if insurable and raw_rate is not None else None,
                premium=_dec(data, "premium"),
                pst_rate=_dec(data, "pstRate") / 100,
                pst=Decimal(str(data["pst"])),
            )
        except (AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Malformed CMHC PST response: %s", e)
            raise ExternalSourceUnavailable("Malformed CMHC PST response") from e
