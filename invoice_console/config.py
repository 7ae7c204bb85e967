from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    api_base_url: str = "http://localhost:5000/api"
    api_token: str | None = None
    api_timeout_seconds: float = 10.0
    default_tax_rate: Decimal = Decimal("18")
    currency_symbol: str = "₹"
    log_level: str = "INFO"
    debug: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
