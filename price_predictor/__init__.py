"""
EGLD AI price predictor console application
"""

__version__ = "1.0.0"
