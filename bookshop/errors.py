# bookshop/errors.py
"""Exceptions shared by the catalogue service and the catalogue client."""


class CatalogError(Exception):
    """Base class for every catalogue failure."""


class ValidationError(CatalogError):
    """A write was rejected (blank title, path/body id mismatch)."""


class StorageCorruptionError(CatalogError):
    """The catalogue file exists but cannot be read back as a book list.

    The store never repairs the file on its own: the service refuses to
    start (or the current operation fails) and the file is left as-is so
    an operator can inspect it.
    """

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"Catalogue file {path} is corrupted: {reason}")
        self.path = path
        self.reason = reason


class CatalogFetchError(CatalogError):
    """The client could not obtain a usable payload from any base URL."""
