"""Catalog passthrough routes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bookshare.api.deps import get_catalog
from bookshare.ports.catalog import CatalogError, CatalogPort

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["Books"])


def _relay(exc: CatalogError, fallback: str) -> HTTPException:
    """Map a catalog failure onto the status the client sees."""
    if exc.status_code is None:
        logger.error("%s: %s", fallback, exc)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback
        )
    return HTTPException(
        status_code=exc.status_code, detail=f"API error: {exc.status_code}"
    )


@router.get("")
async def search_books(
    limit: str = "10",
    search: str = "",
    search_type: str = Query("title", alias="searchType"),
    since_id: str = Query("", alias="sinceId"),
    catalog: CatalogPort = Depends(get_catalog),
) -> Any:
    """Search the catalog; the upstream JSON body is relayed unchanged."""
    try:
        return await catalog.search(
            limit=limit or "10",
            search=search,
            search_type=search_type,
            since_id=since_id,
        )
    except CatalogError as exc:
        raise _relay(exc, "Failed to fetch books")


@router.get("/{book_id}")
async def get_book(
    book_id: str,
    catalog: CatalogPort = Depends(get_catalog),
) -> Any:
    """Return the first catalog record for a book identifier."""
    try:
        record = await catalog.get_bib(book_id)
    except CatalogError as exc:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(status_code=404, detail="Book not found")
        raise _relay(exc, "Failed to fetch book details")

    if record is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return record
