from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Market rates (5-year fixed APR)
    rates_provider: str = "boc"
    default_5y_fixed_apr: float = 5.0
    boc_series_id: str = "V122521"
    boc_base_url: str = "https://www.bankofcanada.ca/valet"
    rates_timeout_seconds: float = 10.0

    # Jurisdiction tax service. Empty = compute in-process
    tax_service_url: str = ""
    tax_service_timeout_seconds: float = 8.0

    # CMA proxy (disabled unless enabled and fully configured)
    cma_enabled: bool = False
    cma_base_url: str = ""
    cma_auth_header: str = "x-api-key"
    cma_api_key: str = ""
    cma_timeout_seconds: float = 8.0

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
