# src/config.py
import os


class Settings:
    """Application configuration settings."""
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./codeshareforum.db")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-secret-key-for-jwt")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    BASE_FRONT_URL: str = os.getenv("BASE_FRONT_URL", "http://localhost:8081")

    CDN_URL = os.getenv("CDN_URL", "https://cdn.codeshareforum.app")
    GCORE_S3_DOMAIN = "s-ed1.cloud.gcore.lu"

    # GCore settings
    GCORE_BUCKET_NAME: str = os.getenv("GCORE_BUCKET_NAME", "codeshareforum")
    GCORE_ENDPOINT_URL: str = "https://s-ed1.cloud.gcore.lu"
    GCORE_REGION_NAME: str = "s-ed1"
    GCORE_ACCESS_KEY: str = os.getenv("GCORE_ACCESS_KEY", "")
    GCORE_SECRET_KEY: str = os.getenv("GCORE_SECRET_KEY", "")

    # SMTP settings
    SMTP_SERVER: str = os.getenv("SMTP_SERVER", "smtp.sendgrid.net")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "apikey")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    FROM_EMAIL: str = os.getenv("FROM_EMAIL", "noreply@codeshareforum.app")
    FROM_NAME: str = "CodeShareForum"

    # News settings
    NEWSDATA_URL: str = "https://newsdata.io/api/1/news"
    NEWSDATA_API_KEY: str = os.getenv("NEWSDATA_API_KEY", "")
    NEWS_LANGUAGE: str = "he"
    NEWS_PREVIEW_LIMIT: int = 3
    NEWS_RECENCY_HOURS: int = 48

    # Forum settings
    HOT_WINDOW_HOURS: int = 24
    HOT_DISCUSSIONS_LIMIT: int = 8
    MIN_PASSWORD_LENGTH: int = 6
    DEFAULT_AUTHOR_NAME: str = "User"


settings = Settings()
