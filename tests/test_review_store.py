"""Tests for the review store adapters."""

import pytest

from bookshare.adapters.review_store.memory import InMemoryReviewStoreAdapter
from bookshare.adapters.review_store.sql import SqlReviewStoreAdapter
from bookshare.domain.models import Review
from bookshare.ports.review_store import summarize_ratings
from tests.factories import make_review


@pytest.fixture
async def sql_store(session_factory):
    async with session_factory() as session:
        session.add_all(
            [
                Review(user_id="alice", book_id="00000000000001", rating=9, text="Great"),
                Review(user_id="alice", book_id="00000000000002", rating=5, text="Meh"),
                Review(user_id="bob", book_id="00000000000001", rating=6, text="Fine"),
            ]
        )
        await session.commit()
    return SqlReviewStoreAdapter(session_factory)


@pytest.mark.asyncio
async def test_sql_reviews_by_user(sql_store):
    reviews = await sql_store.reviews_by_user("alice")
    assert sorted(r.book_id for r in reviews) == ["00000000000001", "00000000000002"]
    assert all(r.created_at is not None for r in reviews)


@pytest.mark.asyncio
async def test_sql_reviews_by_user_with_threshold(sql_store):
    reviews = await sql_store.reviews_by_user("alice", min_rating=7)
    assert [(r.book_id, r.rating) for r in reviews] == [("00000000000001", 9)]


@pytest.mark.asyncio
async def test_sql_reviews_by_book(sql_store):
    reviews = await sql_store.reviews_by_book("00000000000001")
    assert sorted(r.user_id for r in reviews) == ["alice", "bob"]
    assert await sql_store.reviews_by_book("00000000000099") == []


@pytest.mark.asyncio
async def test_memory_store_filters():
    store = InMemoryReviewStoreAdapter(
        [make_review("alice", 1, 8), make_review("alice", 2, 3), make_review("bob", 1, 10)]
    )
    assert len(await store.reviews_by_user("alice")) == 2
    assert [r.book_id for r in await store.reviews_by_user("alice", min_rating=7)] == ["1"]
    assert len(await store.reviews_by_book("1")) == 2


def test_summarize_ratings():
    assert summarize_ratings([]) is None
    summary = summarize_ratings(
        [make_review("a", 1, 7), make_review("b", 1, 8), make_review("c", 1, 8)]
    )
    assert summary.total == 3
    assert summary.average == 7.7

    # 7.25 rounds up, not to the even neighbour
    halfway = summarize_ratings(
        [make_review(u, 1, r) for u, r in (("a", 7), ("b", 7), ("c", 8), ("d", 7))]
    )
    assert halfway.average == 7.3
