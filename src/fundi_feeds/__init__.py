"""
Fundi feeds: paginated fundi, job and payment feeds for the Fundi marketplace.

The package fetches pages from the marketplace REST backend, accumulates
them for infinite scrolling, and keeps search/filter state, reference
metadata and recent searches alongside.
"""

__version__ = "0.1.0"
