"""
Ranked per-user watchlists.
"""

from cinelist.core.watchlist.manager import WatchlistManager, WatchlistHandle, WatchlistEntry
from cinelist.core.watchlist.locks import ListLockRegistry

__all__ = ['WatchlistManager', 'WatchlistHandle', 'WatchlistEntry', 'ListLockRegistry']
