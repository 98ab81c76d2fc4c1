"""
Catalog package for the bookshop API.

This package holds the record schemas, the validation service that sits
on top of ``bookshop.storage.CatalogStore`` and the REST routes that
expose it under ``/api``. The store is created once per process by the
application factory in ``bookshop.main`` and injected into the service;
nothing in this package keeps module-level catalogue state.
"""

from .router import router as catalog_router  # noqa: F401
