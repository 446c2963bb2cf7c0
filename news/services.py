# src/news/services.py
import logging
import requests
from datetime import datetime, timedelta
from typing import List, Optional
from pydantic import ValidationError
from news.schemas import NewsArticle
from config import settings

logger = logging.getLogger(__name__)

NEWS_RECENCY_WINDOW = timedelta(hours=settings.NEWS_RECENCY_HOURS)


class NewsService:
    @staticmethod
    def fetch_news() -> List[NewsArticle]:
        """Fetch the latest articles; raises on any transport or HTTP failure."""
        params = {"apikey": settings.NEWSDATA_API_KEY, "language": settings.NEWS_LANGUAGE}
        response = requests.get(settings.NEWSDATA_URL, params=params, timeout=10)
        if response.status_code != 200:
            logger.error(f"News API non-200 status: {response.status_code}, text={response.text}")
            raise RuntimeError("Failed to fetch news")

        articles = []
        for item in response.json().get("results") or []:
            try:
                articles.append(NewsArticle.model_validate(item))
            except ValidationError as e:
                logger.info(f"Skipping malformed article {item.get('article_id')}: {e.error_count()} errors")
        return articles

    @staticmethod
    def safe_fetch() -> List[NewsArticle]:
        """Best effort: any failure is logged and reads as no news."""
        try:
            return NewsService.fetch_news()
        except Exception as e:
            logger.error(f"News fetch failed: {str(e)}")
            return []

    @staticmethod
    def latest(articles: List[NewsArticle], limit: int = settings.NEWS_PREVIEW_LIMIT) -> List[NewsArticle]:
        return articles[:limit]

    @staticmethod
    def recent(articles: List[NewsArticle], now: Optional[datetime] = None) -> List[NewsArticle]:
        """Articles published inside the recency window, newest first."""
        now = now or datetime.utcnow()
        fresh = [a for a in articles if a.pub_date is not None and now - a.pub_date <= NEWS_RECENCY_WINDOW]
        return sorted(fresh, key=lambda a: a.pub_date, reverse=True)
