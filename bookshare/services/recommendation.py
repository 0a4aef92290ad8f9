"""
Recommendation aggregation over the review store and the catalog.

Every call re-fetches from both sources; nothing is cached. Independent
lookups fan out with asyncio.gather and are collected in input order.
A failed catalog or rating lookup degrades to an empty/absent result,
while a failure reading the user's own reviews propagates to the caller.
"""

import asyncio
import logging
import re
from collections import Counter
from collections.abc import Callable, Iterable
from enum import Enum

from bookshare.api.schemas import (
    Book,
    CategoryCount,
    RecommendationGroup,
    RecommendationGroups,
    RecommendationsResponse,
    RecommendationStats,
    TopCategories,
    pad_book_id,
)
from bookshare.ports.catalog import CatalogError, CatalogPort
from bookshare.ports.review_store import RatingSummary, ReviewStorePort, summarize_ratings

logger = logging.getLogger(__name__)


class CategoryType(str, Enum):
    GENRE = "genre"
    AUTHOR = "author"
    LANGUAGE = "language"


class InvalidRecommendationRequest(ValueError):
    """Raised for missing or malformed recommendation inputs."""


class InvalidCategoryType(InvalidRecommendationRequest):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid category type")
        self.value = value


# ── Author matching ───────────────────────────────

_PARENTHESIZED = re.compile(r"\([^)]*\)")
_PUNCTUATION = re.compile(r"[.,;:]")
_WHITESPACE = re.compile(r"\s+")


def normalize_author_name(name: str) -> str:
    """Lower-case and drop life dates, punctuation and repeated whitespace."""
    name = _PARENTHESIZED.sub("", name.lower())
    name = _PUNCTUATION.sub("", name)
    return _WHITESPACE.sub(" ", name).strip()


def author_matches(candidate: str | None, query: str) -> bool:
    """
    Loose author comparison used by the filtered listing.

    Catalog names look like "Sienkiewicz, Henryk (1846-1916)". A candidate
    matches when its normalized form contains the normalized query, or when
    every query word (each longer than two characters) overlaps some word of
    the candidate.
    """
    if not candidate:
        return False
    normalized = normalize_author_name(candidate)
    wanted = normalize_author_name(query)
    if wanted in normalized:
        return True

    candidate_parts = normalized.split()
    return all(
        len(part) > 2
        and any(cp in part or part in cp for cp in candidate_parts)
        for part in wanted.split()
    )


# ── Category counting ─────────────────────────────


def decade_label(year: int) -> str:
    return f"{year // 10 * 10}s"


def top_categories(
    books: Iterable[Book], key: Callable[[Book], str | None], limit: int
) -> list[CategoryCount]:
    """Most frequent non-empty values of key; ties keep first-seen order."""
    counts = Counter(value for value in map(key, books) if value)
    return [
        CategoryCount(category=category, count=count)
        for category, count in counts.most_common(limit)
    ]


class RecommendationService:
    """Builds similar-book and top-category results for a user."""

    def __init__(
        self,
        catalog: CatalogPort,
        reviews: ReviewStorePort,
        *,
        top_rating_threshold: int = 7,
        top_categories_limit: int = 3,
        similar_books_limit: int = 10,
        filtered_books_limit: int = 12,
    ) -> None:
        self._catalog = catalog
        self._reviews = reviews
        self._top_rating_threshold = top_rating_threshold
        self._top_categories_limit = top_categories_limit
        self._similar_books_limit = similar_books_limit
        self._filtered_books_limit = filtered_books_limit

    # ── Review store lookups ─────────────────────

    async def reviewed_book_ids(self, user_id: str) -> set[str]:
        """Padded identifiers of every book the user has reviewed."""
        reviews = await self._reviews.reviews_by_user(user_id)
        return {pad_book_id(r.book_id) for r in reviews}

    async def rating_for(self, book_id: str) -> RatingSummary | None:
        try:
            reviews = await self._reviews.reviews_by_book(book_id)
        except Exception:
            logger.warning("Rating lookup failed for book %s", book_id, exc_info=True)
            return None
        return summarize_ratings(reviews)

    async def _with_ratings(self, books: list[Book]) -> list[Book]:
        ratings = await asyncio.gather(*(self.rating_for(b.id) for b in books))
        return [
            book.model_copy(
                update={
                    "average_rating": rating.average if rating else None,
                    "total_reviews": rating.total if rating else 0,
                }
            )
            for book, rating in zip(books, ratings)
        ]

    # ── Catalog lookups ──────────────────────────

    async def _find_books(self, **filters) -> list[Book]:
        try:
            return await self._catalog.find_books(**filters)
        except CatalogError as exc:
            logger.warning("Catalog query %s failed: %s", filters, exc)
            return []

    async def _fetch_unreviewed(
        self, reviewed: set[str], keep: int | None = None, **filters
    ) -> list[Book]:
        books = [b for b in await self._find_books(**filters) if b.id not in reviewed]
        if keep is not None:
            books = books[:keep]
        return await self._with_ratings(books)

    async def _resolve_book(self, book_id: str) -> Book | None:
        try:
            return await self._catalog.get_book(book_id)
        except CatalogError as exc:
            logger.warning("Dropping book %s from category stats: %s", book_id, exc)
            return None

    async def liked_books(self, user_id: str) -> list[Book]:
        """Catalog details for every book the user rated at or above the threshold."""
        reviews = await self._reviews.reviews_by_user(
            user_id, min_rating=self._top_rating_threshold
        )
        books = await asyncio.gather(
            *(self._resolve_book(pad_book_id(r.book_id)) for r in reviews)
        )
        return [b for b in books if b is not None]

    # ── Operations ───────────────────────────────

    async def get_similar_books(
        self, user_id: str, category_type: str, category: str
    ) -> list[Book]:
        """Books sharing one attribute value, minus those the user already reviewed."""
        if not user_id or not category_type or not category:
            raise InvalidRecommendationRequest("Missing required parameters")
        try:
            kind = CategoryType(category_type)
        except ValueError:
            raise InvalidCategoryType(category_type) from None

        reviewed = await self.reviewed_book_ids(user_id)
        return await self._fetch_unreviewed(
            reviewed, limit=self._similar_books_limit, **{kind.value: category}
        )

    async def get_top_categories(self, user_id: str) -> TopCategories:
        """Top genres, authors and languages among the user's highly rated books."""
        if not user_id:
            raise InvalidRecommendationRequest("User ID is required")

        books = await self.liked_books(user_id)
        limit = self._top_categories_limit
        return TopCategories(
            by_genre=top_categories(books, lambda b: b.genre, limit),
            by_author=top_categories(books, lambda b: b.author, limit),
            by_language=top_categories(books, lambda b: b.language, limit),
        )

    async def get_filtered_books(
        self,
        user_id: str,
        genre: str | None = None,
        author: str | None = None,
        language: str | None = None,
    ) -> list[Book]:
        """Catalog listing narrowed by any combination of genre, author and language."""
        if not user_id:
            raise InvalidRecommendationRequest("User ID is required")

        reviewed = await self.reviewed_book_ids(user_id)
        limit = self._filtered_books_limit
        author = (author or "").strip()
        if not author:
            return await self._fetch_unreviewed(
                reviewed, genre=genre or None, language=language or None, limit=limit
            )

        # The catalog only matches author prefixes, so fetch wide and match locally.
        candidates = await self._find_books(
            genre=genre or None,
            language=language or None,
            author=author.split()[0],
            limit=max(50, limit),
        )
        matched = [b for b in candidates if author_matches(b.author, author)][:limit]
        return await self._with_ratings([b for b in matched if b.id not in reviewed])

    async def get_recommendations(self, user_id: str) -> RecommendationsResponse:
        """Top categories per dimension together with similar books for each."""
        if not user_id:
            raise InvalidRecommendationRequest("User ID is required")

        reviewed = await self.reviewed_book_ids(user_id)
        books = await self.liked_books(user_id)
        limit = self._top_categories_limit
        stats = RecommendationStats(
            genres=top_categories(books, lambda b: b.genre, limit),
            authors=top_categories(books, lambda b: b.author, limit),
            languages=top_categories(books, lambda b: b.language, limit),
            decades=top_categories(
                books,
                lambda b: decade_label(b.publication_year) if b.publication_year else None,
                limit,
            ),
        )

        async def group(top: CategoryCount, **filters) -> RecommendationGroup:
            similar = await self._fetch_unreviewed(
                reviewed, keep=top.count * 2, limit=top.count * 4, **filters
            )
            return RecommendationGroup(category=top.category, books=similar)

        by_genre, by_author, by_language, by_decade = await asyncio.gather(
            asyncio.gather(*(group(t, genre=t.category) for t in stats.genres)),
            asyncio.gather(*(group(t, author=t.category) for t in stats.authors)),
            asyncio.gather(*(group(t, language=t.category) for t in stats.languages)),
            asyncio.gather(
                *(group(t, decade=int(t.category.rstrip("s"))) for t in stats.decades)
            ),
        )
        return RecommendationsResponse(
            recommendations=RecommendationGroups(
                by_genre=by_genre,
                by_author=by_author,
                by_language=by_language,
                by_decade=by_decade,
            ),
            stats=stats,
        )
