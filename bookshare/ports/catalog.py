"""Catalog port — abstract interface to the bibliographic catalog."""

from abc import ABC, abstractmethod
from typing import Any

from bookshare.api.schemas import Book


class CatalogError(Exception):
    """Raised when the catalog cannot be reached or answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatalogPort(ABC):
    """Abstraction over the external bibliographic API."""

    @abstractmethod
    async def search(
        self,
        limit: str = "10",
        search: str = "",
        search_type: str = "title",
        since_id: str = "",
    ) -> dict[str, Any]:
        """Return the raw catalog search payload."""
        ...

    @abstractmethod
    async def get_bib(self, book_id: str) -> dict[str, Any] | None:
        """Return the raw catalog record for a book, or None if absent."""
        ...

    @abstractmethod
    async def get_book(self, book_id: str) -> Book | None:
        """Return full details for a single book, or None if absent."""
        ...

    @abstractmethod
    async def find_books(
        self,
        genre: str | None = None,
        author: str | None = None,
        language: str | None = None,
        decade: int | None = None,
        limit: int | None = None,
    ) -> list[Book]:
        """Return books matching the given attribute filters."""
        ...
