"""Aggregation of synced pull request data into dashboard statistics."""

from .engine import CodeReviewSyncer
from .windows import WINDOW_DAYS, date_window

__all__ = [
    'CodeReviewSyncer',
    'WINDOW_DAYS',
    'date_window',
]
