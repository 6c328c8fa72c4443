import random

import pytest
from pydantic import ValidationError

from price_predictor.schemas import TimeframeBucket
from price_predictor.strategies import draw_percent, find_bucket, generate_prediction


def bounds(price, bucket):
    return price * (1 + bucket.min_percent / 100), price * (1 + bucket.max_percent / 100)


@pytest.mark.parametrize("price", [0.01, 1.0, 37.42, 100.0, 65000.0])
def test_prediction_stays_within_bucket_bounds(buckets, rng, price):
    for bucket in buckets:
        for _ in range(50):
            prediction = generate_prediction(price, bucket, rng)
            low, high = bounds(price, bucket)
            assert bucket.min_percent <= prediction.percent <= bucket.max_percent
            assert low - 1e-9 <= prediction.predicted_price <= high + 1e-9
            assert prediction.bucket_key == bucket.key
            assert prediction.base_price == price


def test_tomorrow_at_one_hundred(buckets, rng):
    tomorrow = find_bucket(buckets, "tomorrow")
    for _ in range(100):
        prediction = generate_prediction(100.0, tomorrow, rng)
        assert 108.0 - 1e-9 <= prediction.predicted_price <= 110.0 + 1e-9


def test_year_at_fifty(buckets, rng):
    year = find_bucket(buckets, "year")
    for _ in range(100):
        prediction = generate_prediction(50.0, year, rng)
        assert 1550.0 - 1e-9 <= prediction.predicted_price <= 1553.0 + 1e-9


def test_repeated_draws_differ_but_stay_in_bounds(buckets):
    week = find_bucket(buckets, "week")
    rng = random.Random(7)
    predictions = {generate_prediction(200.0, week, rng).predicted_price for _ in range(20)}
    assert len(predictions) > 1
    for value in predictions:
        assert 256.0 - 1e-9 <= value <= 260.0 + 1e-9


def test_degenerate_range_returns_the_single_value():
    bucket = TimeframeBucket(key="flat", label="Flat", min_percent=5.0, max_percent=5.0)
    assert draw_percent(bucket, random.Random(1)) == 5.0
    assert generate_prediction(10.0, bucket).predicted_price == pytest.approx(10.5)


def test_draw_is_clamped_to_the_range():
    class EdgeRandom:
        def uniform(self, a, b):
            return b + 1e-12

    bucket = TimeframeBucket(key="t", label="T", min_percent=8.0, max_percent=10.0)
    assert draw_percent(bucket, EdgeRandom()) == 10.0


@pytest.mark.parametrize("price", [0.0, -1.0, None])
def test_non_positive_price_is_rejected(buckets, price):
    with pytest.raises(ValueError):
        generate_prediction(price, buckets[0])


def test_unknown_bucket_key(buckets):
    with pytest.raises(ValueError, match="Unknown timeframe"):
        find_bucket(buckets, "decade")


def test_bucket_rejects_inverted_range():
    with pytest.raises(ValidationError):
        TimeframeBucket(key="bad", label="Bad", min_percent=10.0, max_percent=8.0)
