"""Review store port — read access to user reviews."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal


@dataclass
class ReviewRecord:
    """A single review as held by the review store."""

    id: str
    user_id: str
    book_id: str
    rating: int
    text: str = ""
    created_at: datetime | None = None


@dataclass
class RatingSummary:
    """Average rating (one decimal) and number of reviews for a book."""

    average: float
    total: int


class ReviewStorePort(ABC):
    """Abstraction for the external review store."""

    @abstractmethod
    async def reviews_by_user(
        self, user_id: str, min_rating: int | None = None
    ) -> list[ReviewRecord]:
        """Return a user's reviews, optionally only those rated at least min_rating."""
        ...

    @abstractmethod
    async def reviews_by_book(self, book_id: str) -> list[ReviewRecord]:
        """Return all reviews written for a book."""
        ...


def summarize_ratings(reviews: list[ReviewRecord]) -> RatingSummary | None:
    """Aggregate review ratings, halves rounding up; None when there are no reviews."""
    if not reviews:
        return None
    average = sum(r.rating for r in reviews) / len(reviews)
    rounded = Decimal(str(average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return RatingSummary(average=float(rounded), total=len(reviews))
