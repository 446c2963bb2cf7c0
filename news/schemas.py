# src/news/schemas.py
from pydantic import AliasChoices, BaseModel, Field, field_validator
from datetime import datetime, timezone
from typing import Optional


class NewsArticle(BaseModel):
    """One article from the external news feed. Never stored."""
    article_id: str
    title: str
    description: Optional[str] = None
    link: str
    image_url: Optional[str] = None
    pub_date: Optional[datetime] = Field(None, validation_alias=AliasChoices("pubDate", "pub_date"))
    source_id: Optional[str] = None
    @field_validator("pub_date", mode="before")
    @classmethod
    def lenient_date(cls, v):
        # newsdata.io sends "YYYY-MM-DD HH:MM:SS" in UTC; anything unparsable is dropped.
        if not v:
            return None
        if not isinstance(v, datetime):
            try:
                v = datetime.fromisoformat(str(v).replace("Z", "+00:00"))
            except ValueError:
                return None
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v
