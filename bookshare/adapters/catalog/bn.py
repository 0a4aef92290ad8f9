"""Catalog adapter for the BN (Biblioteka Narodowa) bibliographic API."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from bookshare.api.schemas import Book, pad_book_id
from bookshare.ports.catalog import CatalogError, CatalogPort

logger = logging.getLogger(__name__)

INSTITUTIONS_BIBS = "/institutions/bibs.json"
NETWORKS_BIBS = "/networks/bibs.json"

BOOK_KIND = "książka"
BOOK_FORM_OF_WORK = "Książki"

# searchType value -> catalog query field; anything else uses free-text search
SEARCH_FIELDS = {
    "title": "title",
    "author": "author",
    "isbn": "isbnIssn",
}


def build_http_client(base_url: str, timeout: float) -> httpx.AsyncClient:
    """Create the shared catalog client. Keep one per process."""
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
    )


class BnCatalogAdapter(CatalogPort):
    """Read-only client for the BN catalog, `https://data.bn.org.pl/api`."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise CatalogError(f"Catalog request failed: {exc}") from exc

        if not resp.is_success:
            logger.warning("Catalog %s answered %d", path, resp.status_code)
            raise CatalogError(
                f"API error: {resp.status_code}", status_code=resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise CatalogError("Catalog returned malformed JSON") from exc
        if not isinstance(data, dict):
            raise CatalogError("Catalog returned malformed JSON")
        return data

    @staticmethod
    def _records(data: dict[str, Any]) -> list[dict[str, Any]]:
        """The `bibs` entries of a response, skipping anything that is not a record."""
        bibs = data.get("bibs")
        if not isinstance(bibs, list):
            return []
        return [record for record in bibs if isinstance(record, dict)]

    async def search(
        self,
        limit: str = "10",
        search: str = "",
        search_type: str = "title",
        since_id: str = "",
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit, "kind": BOOK_KIND}
        if search:
            params[SEARCH_FIELDS.get(search_type, "search")] = search
        if since_id:
            params["sinceId"] = since_id
        return await self._get_json(INSTITUTIONS_BIBS, params)

    async def get_bib(self, book_id: str) -> dict[str, Any] | None:
        data = await self._get_json(NETWORKS_BIBS, {"id": pad_book_id(book_id)})
        bibs = self._records(data)
        return bibs[0] if bibs else None

    async def get_book(self, book_id: str) -> Book | None:
        padded = pad_book_id(book_id)
        data = await self._get_json(INSTITUTIONS_BIBS, {"id": padded})
        bibs = self._records(data)
        if not bibs:
            return None
        return self._to_book({"id": padded, **bibs[0]})

    async def find_books(
        self,
        genre: str | None = None,
        author: str | None = None,
        language: str | None = None,
        decade: int | None = None,
        limit: int | None = None,
    ) -> list[Book]:
        params: dict[str, Any] = {"formOfWork": BOOK_FORM_OF_WORK}
        if author:
            params["author"] = author
        if genre:
            params["genre"] = genre
        if language:
            params["language"] = language
        if decade is not None:
            params["yearFrom"] = decade
            params["yearTo"] = decade + 9
        if limit:
            params["limit"] = limit

        data = await self._get_json(NETWORKS_BIBS, params)
        books = []
        for record in self._records(data):
            book = self._to_book(record)
            if book is not None:
                books.append(book)
        return books

    @staticmethod
    def _to_book(record: dict[str, Any]) -> Book | None:
        try:
            return Book.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping malformed catalog record %s: %s", record.get("id"), exc)
            return None
