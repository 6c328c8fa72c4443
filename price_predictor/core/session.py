"""
Session state: pure reducers over AppState and the store that owns it
"""

import logging
import random
from typing import Callable, List, Optional, Sequence

from price_predictor.schemas import (
    Action, AppState, BucketSelected, FeedFailed, PriceReceived, PriceSample,
    ReselectRequested, Screen, TimeframeBucket,
)
from price_predictor.strategies import find_bucket, generate_prediction

logger = logging.getLogger("session")

StateListener = Callable[[AppState], None]


def price_received(state: AppState, sample: PriceSample, buckets: Sequence[TimeframeBucket],
                   rng: Optional[random.Random] = None) -> AppState:
    """Store a new sample, clear the error and redraw any active prediction"""
    prediction = None
    if state.selected_bucket is not None:
        bucket = find_bucket(buckets, state.selected_bucket)
        prediction = generate_prediction(sample.value, bucket, rng)
    return state.model_copy(update={
        "price": sample,
        "error": None,
        "prediction": prediction,
    })


def feed_failed(state: AppState, message: str) -> AppState:
    """Record a feed error; the last good price is kept"""
    return state.model_copy(update={"error": message})


def select_bucket(state: AppState, key: str, buckets: Sequence[TimeframeBucket],
                  rng: Optional[random.Random] = None) -> AppState:
    """main -> prediction"""
    bucket = find_bucket(buckets, key)
    if state.price is None:
        # Selector is only offered once a price exists
        logger.warning(f"⚠️ Ignoring timeframe '{key}' selection: no price available yet")
        return state
    return state.model_copy(update={
        "screen": Screen.PREDICTION,
        "selected_bucket": bucket.key,
        "prediction": generate_prediction(state.price.value, bucket, rng),
    })


def reselect(state: AppState) -> AppState:
    """prediction -> main"""
    return state.model_copy(update={
        "screen": Screen.MAIN,
        "selected_bucket": None,
        "prediction": None,
    })


def reduce(state: AppState, action: Action, buckets: Sequence[TimeframeBucket],
           rng: Optional[random.Random] = None) -> AppState:
    """Apply one action and return the next state"""
    if isinstance(action, PriceReceived):
        return price_received(state, action.sample, buckets, rng)
    if isinstance(action, FeedFailed):
        return feed_failed(state, action.message)
    if isinstance(action, BucketSelected):
        return select_bucket(state, action.key, buckets, rng)
    if isinstance(action, ReselectRequested):
        return reselect(state)
    raise TypeError(f"Unsupported action: {type(action).__name__}")


class SessionStore:
    """Holds the current AppState; the only place it is replaced"""

    def __init__(self, buckets: Sequence[TimeframeBucket],
                 rng: Optional[random.Random] = None,
                 initial: Optional[AppState] = None):
        self.buckets = list(buckets)
        self.rng = rng
        self._state = initial or AppState()
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> AppState:
        previous = self._state
        self._state = reduce(previous, action, self.buckets, self.rng)
        logger.debug(f"🔁 {type(action).__name__}: {previous.screen.value} -> {self._state.screen.value}")

        if self._state is not previous:
            for listener in list(self._listeners):
                try:
                    listener(self._state)
                except Exception as e:
                    logger.error(f"❌ Error in state listener: {e}")
        return self._state
