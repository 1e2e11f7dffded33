"""Proxy to an external CMA (comparative market analysis) API.

Disabled unless CMA_ENABLED is true and a base URL and API key are configured.
Responses are reduced to {"amount", "source"}; failures return the fallback amount.
"""

import logging
from decimal import Decimal, InvalidOperation

import httpx

from homepurchase.config import settings

logger = logging.getLogger(__name__)


class CMAClient:
    def __init__(
        self,
        enabled: bool | None = None,
        base_url: str | None = None,
        auth_header: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.enabled = settings.cma_enabled if enabled is None else enabled
        self.base_url = (base_url if base_url is not None else settings.cma_base_url).rstrip("/")
        self.auth_header = auth_header or settings.cma_auth_header
        self.api_key = api_key if api_key is not None else settings.cma_api_key
        self.timeout = timeout if timeout is not None else settings.cma_timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.enabled and self.base_url and self.api_key)

    async def proxy(self, pathname: str, payload: dict | None, fallback_amount: Decimal = Decimal("0")) -> dict:
        if not self.configured:
            return {"amount": fallback_amount, "source": "placeholder"}

        url = f"{self.base_url}/{pathname.lstrip('/')}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload or {}, headers={self.auth_header: self.api_key})
                resp.raise_for_status()
                data = resp.json()
            raw = data.get("amount")
            if raw is None:
                raw = data.get("total")
            amount = Decimal(str(raw if raw is not None else 0))
        except (httpx.HTTPError, ValueError, AttributeError, InvalidOperation) as e:
            logger.warning("CMA proxy error for %s: %s", pathname, e)
            return {"amount": fallback_amount, "source": "fallback"}

        return {"amount": amount, "source": "cma"}
