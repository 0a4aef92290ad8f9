"""In-memory review store, used in development and tests."""

import logging
from collections.abc import Iterable

from bookshare.ports.review_store import ReviewRecord, ReviewStorePort

logger = logging.getLogger(__name__)


class InMemoryReviewStoreAdapter(ReviewStorePort):
    """
    In-memory review store for local development and tests.

    Holds a fixed list of reviews; filtering mirrors the equality and
    threshold queries the document store supports.
    """

    def __init__(self, reviews: Iterable[ReviewRecord] = ()) -> None:
        self._reviews = list(reviews)
        logger.info("InMemoryReviewStore initialized with %d reviews", len(self._reviews))

    def add(self, review: ReviewRecord) -> None:
        self._reviews.append(review)

    async def reviews_by_user(
        self, user_id: str, min_rating: int | None = None
    ) -> list[ReviewRecord]:
        return [
            r
            for r in self._reviews
            if r.user_id == user_id and (min_rating is None or r.rating >= min_rating)
        ]

    async def reviews_by_book(self, book_id: str) -> list[ReviewRecord]:
        return [r for r in self._reviews if r.book_id == book_id]
