"""Market 5-year fixed mortgage rate, from the Bank of Canada Valet API."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

import httpx

from homepurchase.config import settings
from homepurchase.errors import ExternalSourceUnavailable
from homepurchase.models.results import MarketRate

logger = logging.getLogger(__name__)

BOC_SOURCE_LABEL = "Bank of Canada (Valet)"
FALLBACK_SOURCE_LABEL = "Fallback (.env DEFAULT_5Y_FIXED_APR)"


class BankOfCanadaClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.boc_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.rates_timeout_seconds
        self._transport = transport

    async def get_latest(self, series_id: str) -> tuple[Decimal, date]:
        """Most recent observation of a Valet series as (value, observation date)."""
        url = f"{self.base_url}/observations/{series_id}/json"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params={"recent": 1}, headers={"Accept": "application/json"})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalSourceUnavailable(f"Valet request failed for {series_id}: {e}") from e

        try:
            observations = data.get("observations") or []
            if not observations:
                raise ExternalSourceUnavailable(f"No observations for {series_id}")

            obs = observations[0]
            # Each observation is {"d": "YYYY-MM-DD", "<series>": {"v": "5.49"}}
            key = next((k for k in obs if k != "d"), None)
            value = Decimal(str(obs[key]["v"]))
            as_of = date.fromisoformat(obs["d"])
        except (AttributeError, IndexError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise ExternalSourceUnavailable(f"Malformed observation for {series_id}") from e
        if not value.is_finite():
            raise ExternalSourceUnavailable(f"Non-numeric observation for {series_id}")
        return value, as_of


class FiveYearFixedRateSource:
    """Resolves the 5-year fixed APR, falling back to the configured default."""

    def __init__(
        self,
        client: BankOfCanadaClient | None = None,
        provider: str | None = None,
        series_id: str | None = None,
        fallback_apr: float | None = None,
    ):
        self.client = client or BankOfCanadaClient()
        self.provider = (provider or settings.rates_provider).lower()
        self.series_id = series_id or settings.boc_series_id
        self.fallback_apr = Decimal(str(fallback_apr if fallback_apr is not None else settings.default_5y_fixed_apr))

    def fallback(self) -> MarketRate:
        return MarketRate(
            apr_percent=self.fallback_apr,
            source=FALLBACK_SOURCE_LABEL,
            as_of=date.today(),
            is_fallback=True,
        )

    async def get_five_year_fixed(self) -> MarketRate:
        if self.provider != "boc":
            return self.fallback()
        try:
            value, as_of = await self.client.get_latest(self.series_id)
        except ExternalSourceUnavailable as e:
            logger.warning("BoC fetch failed, using fallback: %s", e)
            return self.fallback()
        return MarketRate(apr_percent=value, source=BOC_SOURCE_LABEL, as_of=as_of)
