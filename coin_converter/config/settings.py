import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    COINGECKO_BASE_URL: str = "https://api.coingecko.com/api/v3"
    HTTP_TIMEOUT_SEC: float = Field(default=10.0, gt=0)
    THROTTLE_INTERVAL_MS: int = Field(default=500, ge=0)
    PRICE_POLL_INTERVAL_SEC: float = Field(default=300.0, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {
            "COINGECKO_BASE_URL": os.getenv("COINGECKO_BASE_URL"),
            "HTTP_TIMEOUT_SEC": os.getenv("HTTP_TIMEOUT_SEC"),
            "THROTTLE_INTERVAL_MS": os.getenv("THROTTLE_INTERVAL_MS"),
            "PRICE_POLL_INTERVAL_SEC": os.getenv("PRICE_POLL_INTERVAL_SEC"),
        }
        # unset or blank vars fall back to the field defaults
        values = {k: v.strip() for k, v in raw.items() if v is not None and v.strip()}
        if "COINGECKO_BASE_URL" in values:
            values["COINGECKO_BASE_URL"] = values["COINGECKO_BASE_URL"].rstrip("/")

        return cls.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
