"""
Front-end side of the bookshop: catalogue polling, search and cart.

``CatalogApi`` talks to the ``/api`` routes, ``CatalogSync`` keeps a
snapshot of the catalogue fresh (falling back to ``SEED_BOOKS`` when the
backend is down), ``CatalogView`` derives the visible books from that
snapshot and ``Cart`` tracks what the shopper picked.
"""

from .api import CatalogApi  # noqa: F401
from .cart import Cart, CartEntry  # noqa: F401
from .filters import CatalogView, canonical, filter_books  # noqa: F401
from .normalize import SEED_BOOKS, normalize_book, normalize_books  # noqa: F401
from .sync import ALL_CATEGORIES, CatalogSync, HostEvents, Snapshot  # noqa: F401
