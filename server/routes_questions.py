"""FakeSO: question listing, creation, views and votes."""

from __future__ import annotations

import logging
from typing import List, Optional

from broadcast import Broadcaster, get_broadcaster
from config import app
from fastapi import Depends, HTTPException
from models import (
    OrderType,
    QuestionCreate,
    TagIn,
    VoteRequest,
    VoteResponse,
    as_timestamp,
)
from query import filter_questions_by_asked_by, filter_questions_by_search, order_questions
from repository import QUESTION_RELATIONS, Repository, get_repository
from toggles import add_view, toggle_vote

logger = logging.getLogger(__name__)


def process_tags(repo: Repository, tags: List[TagIn]) -> List[dict]:
    """Dedupe tags by name, reusing stored tags and creating missing ones."""
    unique = {}
    for tag in tags:
        unique.setdefault(tag.name, tag)
    processed = []
    for name, tag in unique.items():
        existing = repo.find_one("tags", name=name)
        if existing is None:
            existing = repo.insert(
                "tags", {"name": name, "description": tag.description}
            )
        processed.append(existing)
    return processed


@app.get("/questions")
async def list_questions(
    order: OrderType = "newest",
    search: str = "",
    asked_by: Optional[str] = None,
    repo: Repository = Depends(get_repository),
):
    """List questions in the requested order, filtered by search/author."""
    questions = repo.populate_many(
        "questions", repo.find("questions"), ["tags", "answers"]
    )
    questions = order_questions(questions, order)
    if asked_by:
        questions = filter_questions_by_asked_by(questions, asked_by)
    return filter_questions_by_search(questions, search)


@app.get("/questions/{qid}")
async def get_question(
    qid: int,
    username: str,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Fetch a question and record the requesting user as a viewer."""
    if not username:
        raise HTTPException(400, "Invalid username requesting question")
    viewed = repo.modify(
        "questions", qid, lambda q: {"views": add_view(q["views"], username).views}
    )
    if viewed is None:
        raise HTTPException(404, "Question not found")
    question = repo.fetch_with_relations("questions", qid, QUESTION_RELATIONS)
    await broadcaster.emit("viewsUpdate", question)
    return question


@app.post("/questions")
async def create_question(
    question: QuestionCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Create a question, creating any tags it introduces."""
    tags = process_tags(repo, question.tags)
    saved = repo.insert("questions", {
        "title": question.title,
        "text": question.text,
        "tags": [t["id"] for t in tags],
        "asked_by": question.asked_by,
        "ask_date_time": as_timestamp(question.ask_date_time),
    })
    account = repo.find_one("accounts", username=question.asked_by)
    if account is not None:
        repo.push("accounts", account["id"], "questions", saved["id"])

    populated = repo.populate("questions", saved, QUESTION_RELATIONS)
    logger.info("Question #%s asked by %s", saved["id"], question.asked_by)
    await broadcaster.emit("questionUpdate", populated)
    return populated


async def _vote(qid, username, kind, repo, broadcaster):
    outcome = []

    def change(q):
        result = toggle_vote(q["up_votes"], q["down_votes"], username, kind)
        outcome.append(result)
        return {"up_votes": result.up_votes, "down_votes": result.down_votes}

    if repo.modify("questions", qid, change) is None:
        raise HTTPException(404, "Question not found")
    result = outcome[0]
    await broadcaster.emit("voteUpdate", {
        "qid": qid,
        "up_votes": result.up_votes,
        "down_votes": result.down_votes,
    })
    return VoteResponse(
        msg=result.msg, up_votes=result.up_votes, down_votes=result.down_votes,
    )


@app.post("/questions/{qid}/upvote", response_model=VoteResponse)
async def upvote_question(
    qid: int,
    vote: VoteRequest,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Toggle an upvote; cancels a repeat, replaces a downvote."""
    return await _vote(qid, vote.username, "upvote", repo, broadcaster)


@app.post("/questions/{qid}/downvote", response_model=VoteResponse)
async def downvote_question(
    qid: int,
    vote: VoteRequest,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Toggle a downvote; cancels a repeat, replaces an upvote."""
    return await _vote(qid, vote.username, "downvote", repo, broadcaster)
