"""Recommendation routes."""

import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bookshare.api.deps import get_recommendation_service
from bookshare.api.schemas import (
    BooksResponse,
    CategoriesResponse,
    ErrorResponse,
    RecommendationsResponse,
)
from bookshare.services.recommendation import (
    InvalidRecommendationRequest,
    RecommendationService,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/recommendations",
    tags=["Recommendations"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

T = TypeVar("T")


async def _guard(call: Awaitable[T], failure: str) -> T:
    """Turn bad input into 400 and anything unexpected into a generic 500."""
    try:
        return await call
    except InvalidRecommendationRequest as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception:
        logger.exception(failure)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure
        )


@router.get("", response_model=RecommendationsResponse)
async def get_recommendations(
    user_id: str = Query("", alias="userId"),
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    """Top categories of the user's favourite books with similar titles for each."""
    return await _guard(
        service.get_recommendations(user_id), "Failed to fetch recommendations"
    )


@router.get("/books", response_model=BooksResponse)
async def get_similar_books(
    user_id: str = Query("", alias="userId"),
    category_type: str = Query("", alias="type"),
    category: str = "",
    service: RecommendationService = Depends(get_recommendation_service),
) -> BooksResponse:
    """Books sharing a genre, author or language, excluding ones already reviewed."""
    books = await _guard(
        service.get_similar_books(user_id, category_type, category), "Failed to fetch books"
    )
    return BooksResponse(books=books)


@router.get("/categories", response_model=CategoriesResponse)
async def get_top_categories(
    user_id: str = Query("", alias="userId"),
    service: RecommendationService = Depends(get_recommendation_service),
) -> CategoriesResponse:
    """Top three genres, authors and languages among the user's highly rated books."""
    categories = await _guard(
        service.get_top_categories(user_id),
        "Failed to fetch recommendation categories",
    )
    return CategoriesResponse(categories=categories)


@router.get("/filtered", response_model=BooksResponse)
async def get_filtered_books(
    user_id: str = Query("", alias="userId"),
    genre: str | None = None,
    author: str | None = None,
    language: str | None = None,
    service: RecommendationService = Depends(get_recommendation_service),
) -> BooksResponse:
    """Catalog books narrowed by any of genre, author and language."""
    books = await _guard(
        service.get_filtered_books(user_id, genre=genre, author=author, language=language),
        "Failed to fetch filtered books",
    )
    return BooksResponse(books=books)
