from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Article ---

class ArticleCreate(BaseModel):
    # Optional at the schema level so a missing field is reported the same
    # way as an empty one (see article_service.create_article).
    title: str | None = None
    author: str | None = None
    body: str | None = None


class ArticleResponse(BaseModel):
    id: int
    title: str
    author: str
    body: str
    likes_count: int
    views_count: int
    model_config = ConfigDict(from_attributes=True)


# --- Engagement ---

class EngagementKind(str, Enum):
    LIKE = "like"
    VIEW = "view"


class EngagementRequest(BaseModel):
    user_id: str = Field(alias="userId")
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value):
        # Clients send numeric and string ids interchangeably.
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        return value


class EngagementResponse(BaseModel):
    message: str


# --- Popularity ---

class PopularArticle(BaseModel):
    id: str
    score: int


# --- Notifications ---

class NotificationResponse(BaseModel):
    id: int
    user_id: str
    article_id: int
    message: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_articles: int
    total_like_events: int
    total_view_events: int
    total_notifications: int
    likes_count_sum: int
    views_count_sum: int
    # Counter increments beyond the deduplicated ledger (repeat engagement).
    likes_drift: int
    views_drift: int
    ranked_articles: int
