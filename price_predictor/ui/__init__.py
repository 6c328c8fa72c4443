"""
Console user interface
"""

from .console import ConsoleUI, format_percent, format_time, format_usd
from .input_reader import StdinReader

__all__ = [
    'ConsoleUI',
    'StdinReader',
    'format_percent',
    'format_time',
    'format_usd'
]
