"""Pydantic schemas for catalog records and API payloads."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BOOK_ID_LENGTH = 14

_YEAR_RE = re.compile(r"\d{4}")


def pad_book_id(value: Any) -> str:
    """Left-pad a book identifier with zeros to the catalog's 14 characters."""
    return str(value if value is not None else "").zfill(BOOK_ID_LENGTH)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ── Catalog ───────────────────────────────────────


class Book(CamelModel):
    """A catalog record with the rating aggregate attached."""

    id: str = Field(default="", validate_default=True)
    title: str | None = None
    author: str | None = None
    genre: str | None = None
    language: str | None = None
    publication_year: int | None = None
    kind: str | None = None
    form_of_work: str | None = None
    subject: str | None = None
    domain: str | None = None
    publisher: str | None = None
    place_of_publication: str | None = None
    isbn_issn: str | None = None
    marc: dict[str, Any] | None = None
    average_rating: float | None = None
    total_reviews: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _pad_id(cls, value: Any) -> str:
        return pad_book_id(value)

    @field_validator("publication_year", mode="before")
    @classmethod
    def _parse_year(cls, value: Any) -> int | None:
        # The catalog sends years as free text, e.g. "2004" or "[ca 1990]".
        if value is None or isinstance(value, int):
            return value
        match = _YEAR_RE.search(str(value))
        return int(match.group(0)) if match else None


class CategoryCount(CamelModel):
    category: str
    count: int


# ── Recommendations ───────────────────────────────


class BooksResponse(CamelModel):
    books: list[Book]


class TopCategories(CamelModel):
    by_genre: list[CategoryCount] = Field(default_factory=list)
    by_author: list[CategoryCount] = Field(default_factory=list)
    by_language: list[CategoryCount] = Field(default_factory=list)


class CategoriesResponse(CamelModel):
    categories: TopCategories


class RecommendationGroup(CamelModel):
    category: str
    books: list[Book]


class RecommendationGroups(CamelModel):
    by_genre: list[RecommendationGroup] = Field(default_factory=list)
    by_author: list[RecommendationGroup] = Field(default_factory=list)
    by_language: list[RecommendationGroup] = Field(default_factory=list)
    by_decade: list[RecommendationGroup] = Field(default_factory=list)


class RecommendationStats(CamelModel):
    genres: list[CategoryCount] = Field(default_factory=list)
    authors: list[CategoryCount] = Field(default_factory=list)
    languages: list[CategoryCount] = Field(default_factory=list)
    decades: list[CategoryCount] = Field(default_factory=list)


class RecommendationsResponse(CamelModel):
    recommendations: RecommendationGroups
    stats: RecommendationStats


# ── Session ───────────────────────────────────────


class SessionRequest(BaseModel):
    token: str = Field(min_length=1)


class SessionResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
