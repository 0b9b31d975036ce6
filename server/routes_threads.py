"""FakeSO: private threads and their messages."""

from __future__ import annotations

import logging

from broadcast import Broadcaster, get_broadcaster
from config import app
from db import now_iso
from fastapi import Depends, HTTPException
from models import (
    InteractRequest,
    LikeResponse,
    MessageCreate,
    MessageResponse,
    ThreadCreate,
    ViewResponse,
    as_timestamp,
)
from query import sort_messages_chronologically, sort_threads_by_updated
from repository import Repository, get_repository
from toggles import add_view, push_capped, toggle_like

logger = logging.getLogger(__name__)


@app.get("/threads")
async def list_threads(username: str, repo: Repository = Depends(get_repository)):
    """Threads the user takes part in, most recently active first."""
    account = repo.find_one("accounts", username=username)
    if account is None:
        raise HTTPException(404, "User not found")
    threads = repo.populate_many(
        "threads", repo.get_many("threads", account["threads"]), ["messages"]
    )
    return sort_threads_by_updated(threads)


@app.get("/threads/{tid}")
async def read_thread(
    tid: int,
    username: str,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Open a thread: the reader has now seen its latest message."""
    if not username:
        raise HTTPException(400, "Invalid username requesting thread")
    thread = repo.fetch_with_relations("threads", tid, ["messages"])
    if thread is None:
        raise HTTPException(404, "Thread not found")

    messages = sort_messages_chronologically(thread["messages"])
    if messages:
        latest = messages[-1]
        repo.modify(
            "messages", latest["id"],
            lambda m: {"views": add_view(m["views"], username).views},
        )
        thread = repo.fetch_with_relations("threads", tid, ["messages"])
        messages = sort_messages_chronologically(thread["messages"])

    thread["messages"] = messages
    await broadcaster.emit("messageViewsUpdate", thread)
    return thread


@app.post("/threads")
async def create_thread(
    body: ThreadCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Start a thread between two accounts; only one per pair."""
    sender, recipient = body.accounts
    recipient_account = repo.find_one("accounts", username=recipient)
    if recipient_account is None or repo.find_one("accounts", username=sender) is None:
        raise HTTPException(404, "User does not exist")

    for thread in repo.get_many("threads", recipient_account["threads"]):
        if sender in thread["accounts"]:
            raise HTTPException(400, "Thread already exists between users")

    saved = repo.insert("threads", {
        "messages": [],
        "accounts": [sender, recipient],
        "thread_updated_date_time": now_iso(),
    })
    for username in (sender, recipient):
        account = repo.find_one("accounts", username=username)
        repo.push("accounts", account["id"], "threads", saved["id"])

    thread = repo.populate("threads", saved, ["messages"])
    logger.info("Thread #%s started between %s and %s", saved["id"], sender, recipient)
    await broadcaster.emit("threadUpdate", thread)
    return thread


@app.post("/threads/{tid}/messages", response_model=MessageResponse)
async def send_message(
    tid: int,
    message: MessageCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Post a message. Threads keep the newest messages only."""
    thread = repo.get("threads", tid)
    if thread is None:
        raise HTTPException(404, "Thread not found")
    # Forum threads have no fixed participants
    if thread["accounts"] and message.sender not in thread["accounts"]:
        raise HTTPException(403, "Sender not in thread")

    saved = repo.insert("messages", {
        "sender": message.sender,
        "message_date_time": as_timestamp(message.message_date_time),
        "content": message.content,
    })
    updated = repo.modify("threads", tid, lambda t: {
        "messages": push_capped(t["messages"], saved["id"]),
        "thread_updated_date_time": now_iso(),
    })
    thread = repo.populate("threads", updated, ["messages"])
    await broadcaster.emit("messageUpdate", {"result": thread})
    return saved


@app.post("/messages/{mid}/view", response_model=ViewResponse)
async def view_message(
    mid: int, body: InteractRequest, repo: Repository = Depends(get_repository)
):
    outcome = []

    def change(m):
        outcome.append(add_view(m["views"], body.username))
        return {"views": outcome[0].views}

    if repo.modify("messages", mid, change) is None:
        raise HTTPException(404, "Message not found")
    return ViewResponse(msg=outcome[0].msg, views=outcome[0].views)


@app.post("/messages/{mid}/like", response_model=LikeResponse)
async def like_message(
    mid: int,
    body: InteractRequest,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Toggle the user's like on a message."""
    outcome = []

    def change(m):
        outcome.append(toggle_like(m["likes"], body.username))
        return {"likes": outcome[0].likes}

    if repo.modify("messages", mid, change) is None:
        raise HTTPException(404, "Message not found")
    result = outcome[0]
    await broadcaster.emit("messageLikeUpdate", {"mid": mid, "likes": result.likes})
    return LikeResponse(msg=result.msg, likes=result.likes)
