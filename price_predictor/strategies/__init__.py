"""
Random prediction strategy package
"""

from .random_prediction import draw_percent, find_bucket, generate_prediction

__all__ = [
    'draw_percent',
    'find_bucket',
    'generate_prediction'
]
