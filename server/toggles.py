"""FakeSO: toggle-set helpers for votes, likes and views.

Pure functions: each takes the current username lists and returns new
ones plus a status message. Inputs are never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from config import MAX_THREAD_MESSAGES


@dataclass
class VoteResult:
    """Outcome of an up/down vote toggle."""
    msg: str
    up_votes: List[str] = field(default_factory=list)
    down_votes: List[str] = field(default_factory=list)


@dataclass
class LikeResult:
    msg: str
    likes: List[str] = field(default_factory=list)


@dataclass
class ViewResult:
    msg: str
    views: List[str] = field(default_factory=list)


def _without(values, username) -> list:
    return [v for v in values or [] if v != username]


def toggle_vote(up_votes, down_votes, username: str, kind: str) -> VoteResult:
    """Toggle ``username``'s vote of ``kind`` ("upvote" or "downvote").

    Voting again cancels the vote; voting the other way moves it.
    """
    up = list(up_votes or [])
    down = list(down_votes or [])
    if kind == "upvote":
        if username in up:
            up = _without(up, username)
        else:
            up.append(username)
            down = _without(down, username)
        msg = ("Question upvoted successfully" if username in up
               else "Upvote cancelled successfully")
    else:
        if username in down:
            down = _without(down, username)
        else:
            down.append(username)
            up = _without(up, username)
        msg = ("Question downvoted successfully" if username in down
               else "Downvote cancelled successfully")
    return VoteResult(msg=msg, up_votes=up, down_votes=down)


def toggle_like(likes, username: str) -> LikeResult:
    current = list(likes or [])
    if username in current:
        current = _without(current, username)
    else:
        current.append(username)
    msg = ("Message liked successfully" if username in current
           else "Like removed successfully")
    return LikeResult(msg=msg, likes=current)


def add_view(views, username: str) -> ViewResult:
    """Views only ever grow."""
    current = list(views or [])
    if username not in current:
        current.append(username)
    return ViewResult(msg="View added successfully", views=current)


def push_capped(refs, ref, limit: int = MAX_THREAD_MESSAGES) -> list:
    """Prepend ``ref`` and drop the oldest entries beyond ``limit``."""
    return [ref, *(refs or [])][:limit]
