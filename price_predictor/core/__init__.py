"""
Session state and application runner
"""

from .session import SessionStore, reduce
from .predictor_app import PredictorApp, fetch_once

__all__ = [
    'PredictorApp',
    'SessionStore',
    'fetch_once',
    'reduce'
]
