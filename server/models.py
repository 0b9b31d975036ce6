"""FakeSO: Pydantic request/response models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

OrderType = Literal["newest", "unanswered", "active", "mostViewed"]
ColorBlindness = Literal["none", "redgreen", "blueyellow", "grayscale"]


def as_timestamp(value: Optional[datetime]) -> str:
    """ISO timestamp for a client-supplied datetime, defaulting to now."""
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


# --- Questions, answers, comments, tags ---


class TagIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=20)
    description: str = ""


class QuestionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=50000)
    tags: List[TagIn] = Field(..., min_length=1, max_length=5)
    asked_by: str = Field(..., min_length=1, max_length=100)
    ask_date_time: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def accept_tag_names(cls, v):
        if isinstance(v, list):
            return [{"name": t} if isinstance(t, str) else t for t in v]
        return v

    @field_validator("title", "text", "asked_by")
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class VoteRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)


class AnswerCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=50000)
    ans_by: str = Field(..., min_length=1, max_length=100)
    ans_date_time: Optional[datetime] = None


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    comment_by: str = Field(..., min_length=1, max_length=100)
    comment_date_time: Optional[datetime] = None


class TagResponse(BaseModel):
    id: int
    name: str
    description: str = ""


class TagCount(BaseModel):
    name: str
    qcnt: int


class VoteResponse(BaseModel):
    msg: str
    up_votes: List[str]
    down_votes: List[str]


# --- Accounts and profiles ---


class AccessibilitySettings(BaseModel):
    color_blindness: ColorBlindness = "none"
    low_vision: bool = False


class AccountCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254)
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def looks_like_email(cls, v):
        if "@" not in v:
            raise ValueError("invalid email address")
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    id: int
    username: str
    email: str
    bio: str = ""
    created_at: str
    questions: List[int] = []
    answers: List[int] = []
    threads: List[int] = []
    accessibility_settings: AccessibilitySettings = AccessibilitySettings()


class BioUpdate(BaseModel):
    bio: str = Field(..., min_length=1, max_length=1000)


class BioResponse(BaseModel):
    username: str
    bio: str = ""


# --- Threads, messages, forums ---


class ThreadCreate(BaseModel):
    accounts: List[str] = Field(..., min_length=2, max_length=2)

    @field_validator("accounts")
    @classmethod
    def distinct_accounts(cls, v):
        if any(not a for a in v):
            raise ValueError("account usernames must not be empty")
        if v[0] == v[1]:
            raise ValueError("a thread needs two different accounts")
        return v


class MessageCreate(BaseModel):
    sender: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=5000)
    message_date_time: Optional[datetime] = None


class MessageResponse(BaseModel):
    id: int
    sender: str
    message_date_time: str
    content: str
    views: List[str] = []
    likes: List[str] = []


class InteractRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)


class LikeResponse(BaseModel):
    msg: str
    likes: List[str]


class ViewResponse(BaseModel):
    msg: str
    views: List[str]


class ForumCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)


class ForumResponse(BaseModel):
    id: int
    name: str
    description: str
    thread: Optional[int] = None
