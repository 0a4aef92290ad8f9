"""SQLAlchemy-backed review store adapter (PostgreSQL, SQLite, ...)."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookshare.domain.models import Review
from bookshare.ports.review_store import ReviewRecord, ReviewStorePort

logger = logging.getLogger(__name__)


class SqlReviewStoreAdapter(ReviewStorePort):
    """Read reviews from a relational database via an async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def reviews_by_user(
        self, user_id: str, min_rating: int | None = None
    ) -> list[ReviewRecord]:
        stmt = select(Review).where(Review.user_id == user_id)
        if min_rating is not None:
            stmt = stmt.where(Review.rating >= min_rating)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        logger.debug("Loaded %d reviews for user %s", len(rows), user_id)
        return [self._to_record(r) for r in rows]

    async def reviews_by_book(self, book_id: str) -> list[ReviewRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Review).where(Review.book_id == book_id)
            )
            rows = result.scalars().all()
        return [self._to_record(r) for r in rows]

    @staticmethod
    def _to_record(review: Review) -> ReviewRecord:
        return ReviewRecord(
            id=review.id,
            user_id=review.user_id,
            book_id=review.book_id,
            rating=review.rating,
            text=review.text or "",
            created_at=review.created_at,
        )
