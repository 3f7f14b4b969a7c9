"""Bookstore catalog API.

Catalog and category management backend for an online bookstore.
"""

__version__ = "0.1.0"
