"""Error kinds shared by the engines, data sources and API."""


class InvalidInput(ValueError):
    """Out-of-range numeric input (price, down payment, deposit, APR, amortization)."""


class ExternalSourceUnavailable(RuntimeError):
    """A tax or rate lookup failed or timed out. Callers fall back locally."""
