# src/news/routes.py
from fastapi import APIRouter
from typing import List
from news.schemas import NewsArticle
from news.services import NewsService

router = APIRouter(prefix="/news", tags=["news"])


@router.get("", response_model=List[NewsArticle])
def get_news(preview: bool = False) -> List[NewsArticle]:
    """Recent articles, or the first few for the home page preview."""
    articles = NewsService.safe_fetch()
    if preview:
        return NewsService.latest(articles)
    return NewsService.recent(articles)
