"""Configuration for the channel pulse app."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()



def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    app_env: str
    secret_key: str
    youtube_api_key: str
    max_feed_items: int
    cache_max_age_seconds: int
    cpm_low_usd: float
    cpm_high_usd: float
    trust_proxy: bool

    @property
    def cpm_band(self) -> Tuple[float, float]:
        return (self.cpm_low_usd, self.cpm_high_usd)

    @staticmethod
    def from_env() -> "AppConfig":
        return AppConfig(
            app_env=os.getenv("APP_ENV", "development"),
            secret_key=os.getenv("SECRET_KEY", "dev-change-me"),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
            max_feed_items=int(os.getenv("MAX_FEED_ITEMS", "15")),
            cache_max_age_seconds=int(os.getenv("CACHE_MAX_AGE_SECONDS", "3600")),
            cpm_low_usd=float(os.getenv("CPM_LOW_USD", "2.0")),
            cpm_high_usd=float(os.getenv("CPM_HIGH_USD", "12.0")),
            trust_proxy=_env_bool("TRUST_PROXY", True),
        )

    def to_flask_config(self) -> dict:
        return {
            "APP_ENV": self.app_env,
            "SECRET_KEY": self.secret_key,
            "YOUTUBE_API_KEY": self.youtube_api_key,
            "MAX_FEED_ITEMS": self.max_feed_items,
            "CACHE_MAX_AGE_SECONDS": self.cache_max_age_seconds,
            "CPM_BAND_USD": self.cpm_band,
            "TRUST_PROXY": self.trust_proxy,
        }
