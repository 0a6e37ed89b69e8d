"""
Per-user movie ratings.
"""

from cinelist.core.ratings.manager import RatingManager, RatingEntry, MIN_SCORE, MAX_SCORE

__all__ = ['RatingManager', 'RatingEntry', 'MIN_SCORE', 'MAX_SCORE']
