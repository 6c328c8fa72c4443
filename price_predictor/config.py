"""
Configuration settings using Pydantic
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field

from price_predictor.schemas import TimeframeBucket


# Presentation constants for the prediction screen, not derived from any model
DEFAULT_TIMEFRAMES = [
    {"key": "tomorrow", "label": "Tomorrow", "min_percent": 8.0, "max_percent": 10.0},
    {"key": "week", "label": "Next Week", "min_percent": 28.0, "max_percent": 30.0},
    {"key": "month", "label": "Next Month", "min_percent": 220.0, "max_percent": 222.0},
    {"key": "year", "label": "Next Year", "min_percent": 3000.0, "max_percent": 3006.0},
]


class Settings(BaseSettings):
    """Application settings"""

    # Price Feed Settings
    PRICE_API_URL: str = Field(default="https://api.coingecko.com/api/v3/simple/price")
    ASSET_ID: str = Field(default="elrond-erd-2")
    ASSET_SYMBOL: str = Field(default="EGLD")
    VS_CURRENCY: str = Field(default="usd")
    POLL_INTERVAL: float = Field(default=30.0, gt=0)  # seconds between price requests
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0)

    # Timeframe buckets offered on the main screen
    TIMEFRAMES: List[TimeframeBucket] = Field(
        default_factory=lambda: [TimeframeBucket(**tf) for tf in DEFAULT_TIMEFRAMES]
    )

    # Console Text
    BANNER_TITLE: str = Field(default="EGLD AI PRICE PREDICTOR")
    PRICE_SOURCE_LABEL: str = Field(default="Live from CoinGecko")
    PREDICTION_NOTE: str = Field(default="AI generated price based on current market volumes and BTC price")
    FOOTER_NOTE: str = Field(default="Enjoyed this app? Like & tip the creator on Vibeox!")

    # Logging
    LOG_LEVEL: str = Field(default="WARNING")
    LOG_FILE: str = Field(default="logs/predictor.log")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
_settings = None


def get_settings() -> Settings:
    """Get application settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment"""
    global _settings
    _settings = None


def get_timeframe_buckets() -> List[TimeframeBucket]:
    """Get the configured timeframe buckets in display order"""
    return list(get_settings().TIMEFRAMES)


def get_feed_config() -> dict:
    """Get price feed configuration"""
    settings = get_settings()
    return {
        "api_url": settings.PRICE_API_URL,
        "asset_id": settings.ASSET_ID,
        "vs_currency": settings.VS_CURRENCY,
        "poll_interval": settings.POLL_INTERVAL,
        "request_timeout": settings.REQUEST_TIMEOUT,
    }
