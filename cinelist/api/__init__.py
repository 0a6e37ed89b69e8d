"""
HTTP API for the movie catalog and user watchlists.
"""
