from pydantic import BaseModel, Field, model_validator
from typing import Optional, Union
from datetime import datetime, timezone
from enum import Enum


class Screen(str, Enum):
    """Console screens"""
    MAIN = "main"
    PREDICTION = "prediction"


class PriceSample(BaseModel):
    """Most recently fetched price and when it was observed"""
    value: float = Field(gt=0.0)
    observed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True


class TimeframeBucket(BaseModel):
    """Named time horizon with the percentage range used to fabricate a move"""
    key: str
    label: str
    min_percent: float
    max_percent: float

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_range(self):
        if self.min_percent > self.max_percent:
            raise ValueError(
                f"min_percent ({self.min_percent}) must not exceed max_percent ({self.max_percent})"
            )
        return self


class Prediction(BaseModel):
    """Fabricated future price and the percentage move used to derive it"""
    bucket_key: str
    base_price: float
    percent: float
    predicted_price: float

    class Config:
        frozen = True


class AppState(BaseModel):
    """Immutable session state rendered by the console"""
    screen: Screen = Screen.MAIN
    price: Optional[PriceSample] = None
    error: Optional[str] = None
    selected_bucket: Optional[str] = None
    prediction: Optional[Prediction] = None

    class Config:
        frozen = True

    @property
    def is_loading(self) -> bool:
        return self.price is None and self.error is None

    @property
    def is_stale(self) -> bool:
        return self.price is not None and self.error is not None


# Actions dispatched to the session store

class PriceReceived(BaseModel):
    sample: PriceSample

    class Config:
        frozen = True


class FeedFailed(BaseModel):
    message: str

    class Config:
        frozen = True


class BucketSelected(BaseModel):
    key: str

    class Config:
        frozen = True


class ReselectRequested(BaseModel):
    class Config:
        frozen = True


Action = Union[PriceReceived, FeedFailed, BucketSelected, ReselectRequested]
