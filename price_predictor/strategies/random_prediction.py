#!/usr/bin/env python3
"""
Random Prediction Strategy
Fabricates a future price by applying a uniformly drawn percentage increase
taken from the selected timeframe bucket's fixed range
"""

import logging
import random
from typing import Iterable, Optional

from price_predictor.schemas import Prediction, TimeframeBucket

logger = logging.getLogger("prediction")


def draw_percent(bucket: TimeframeBucket, rng: Optional[random.Random] = None) -> float:
    """Draw a percentage uniformly from [min_percent, max_percent]"""
    rng = rng or random
    if bucket.min_percent == bucket.max_percent:
        return bucket.min_percent
    percent = rng.uniform(bucket.min_percent, bucket.max_percent)
    # uniform() can round just past the upper bound
    return min(max(percent, bucket.min_percent), bucket.max_percent)


def generate_prediction(current_price: float, bucket: TimeframeBucket,
                        rng: Optional[random.Random] = None) -> Prediction:
    """Generate a fresh prediction for the given price and bucket"""
    if current_price is None or current_price <= 0:
        raise ValueError(f"current price must be positive, got {current_price!r}")

    percent = draw_percent(bucket, rng)
    predicted_price = current_price * (1 + percent / 100)
    logger.debug(
        f"🎲 {bucket.key}: +{percent:.4f}% on ${current_price:.4f} -> ${predicted_price:.4f}"
    )
    return Prediction(
        bucket_key=bucket.key,
        base_price=current_price,
        percent=percent,
        predicted_price=predicted_price,
    )


def find_bucket(buckets: Iterable[TimeframeBucket], key: str) -> TimeframeBucket:
    """Look up a bucket by key"""
    for bucket in buckets:
        if bucket.key == key:
            return bucket
    raise ValueError(f"Unknown timeframe: {key!r}")
