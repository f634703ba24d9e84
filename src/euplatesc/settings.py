"""Gateway client settings via environment variables."""

from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings"]


class Settings(BaseSettings):
    """Merchant credentials and service options, all from environment."""

    model_config = SettingsConfigDict(env_prefix="EUPLATESC_")

    # Merchant account (from the EuPlatesc admin panel)
    merchant_id: str = ""
    secret_key: SecretStr = SecretStr("")

    # Select the sandbox endpoint
    sandbox: bool = False

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    @property
    def is_configured(self) -> bool:
        return bool(self.merchant_id and self.secret_key.get_secret_value())
