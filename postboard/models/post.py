from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone


def truncate_to_millis(value: datetime) -> datetime:
    # MongoDB keeps millisecond precision
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utcnow() -> datetime:
    return truncate_to_millis(datetime.now(timezone.utc))


class Reaction(BaseModel):
    """A single like or dislike entry."""
    user: str


class Comment(BaseModel):
    id: str
    user: str
    text: str
    name: str
    avatar: Optional[str] = None
    date: datetime = Field(default_factory=utcnow)


class Post(BaseModel):
    id: str
    user: str
    text: str
    name: str
    avatar: Optional[str] = None
    likes: List[Reaction] = []
    dislikes: List[Reaction] = []
    comments: List[Comment] = []
    date: datetime = Field(default_factory=utcnow)


class PostCreate(BaseModel):
    text: str = Field(default="", validate_default=True)

    @field_validator("text", mode="before")
    @classmethod
    def text_required(cls, value):
        if value is None or value == "":
            raise ValueError("Text is required")
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value


class CommentCreate(PostCreate):
    pass


class Message(BaseModel):
    msg: str
