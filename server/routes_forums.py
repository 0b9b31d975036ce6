"""FakeSO: forums, each backed by an open discussion thread."""

from __future__ import annotations

from typing import List

from broadcast import Broadcaster, get_broadcaster
from config import app
from db import now_iso
from fastapi import Depends
from models import ForumCreate, ForumResponse
from repository import Repository, get_repository


@app.get("/forums", response_model=List[ForumResponse])
async def list_forums(repo: Repository = Depends(get_repository)):
    return repo.find("forums")


@app.post("/forums", response_model=ForumResponse)
async def create_forum(
    forum: ForumCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Create a forum together with its (participant-less) thread."""
    thread = repo.insert("threads", {
        "messages": [],
        "accounts": [],
        "thread_updated_date_time": now_iso(),
    })
    saved = repo.insert("forums", {
        "name": forum.name,
        "description": forum.description,
        "thread": thread["id"],
    })
    response = ForumResponse(**saved)
    await broadcaster.emit("forumUpdate", response)
    return response
