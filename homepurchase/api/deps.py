"""FastAPI dependency injection."""

from homepurchase.config import settings
from homepurchase.data.calculator import PurchaseCalculator
from homepurchase.data.cma import CMAClient
from homepurchase.data.local import LocalTaxService
from homepurchase.data.rates import FiveYearFixedRateSource
from homepurchase.data.tax_service import TaxServiceClient


def get_tax_service() -> LocalTaxService | TaxServiceClient:
    if settings.tax_service_url:
        return TaxServiceClient()
    return LocalTaxService()


def get_rate_source() -> FiveYearFixedRateSource:
    return FiveYearFixedRateSource()


def get_cma_client() -> CMAClient:
    return CMAClient()


def get_calculator() -> PurchaseCalculator:
    tax_service = get_tax_service()
    return PurchaseCalculator(
        ltt_source=tax_service,
        cmhc_source=tax_service,
        rate_source=get_rate_source(),
    )
