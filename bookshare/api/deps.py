"""FastAPI dependencies resolving request-time collaborators from app.state."""

from fastapi import Request

from bookshare.config import Settings
from bookshare.ports.catalog import CatalogPort
from bookshare.services.recommendation import RecommendationService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> CatalogPort:
    return request.app.state.catalog


def get_recommendation_service(request: Request) -> RecommendationService:
    cfg: Settings = request.app.state.settings
    return RecommendationService(
        catalog=request.app.state.catalog,
        reviews=request.app.state.review_store,
        top_rating_threshold=cfg.top_rating_threshold,
        top_categories_limit=cfg.top_categories_limit,
        similar_books_limit=cfg.similar_books_limit,
        filtered_books_limit=cfg.filtered_books_limit,
    )
