"""
Core components: the catalog synchronizer and the ranked watchlist engine.
"""
