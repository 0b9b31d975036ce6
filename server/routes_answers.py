"""FakeSO: answer and comment endpoints."""

from __future__ import annotations

import logging

from broadcast import Broadcaster, get_broadcaster
from config import app
from fastapi import Depends, HTTPException
from models import AnswerCreate, CommentCreate, as_timestamp
from repository import QUESTION_RELATIONS, Repository, get_repository

logger = logging.getLogger(__name__)


@app.post("/questions/{qid}/answers")
async def create_answer(
    qid: int,
    answer: AnswerCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Answer a question. Newest answers are listed first."""
    if repo.get("questions", qid) is None:
        raise HTTPException(404, "Question not found")

    saved = repo.insert("answers", {
        "text": answer.text,
        "ans_by": answer.ans_by,
        "ans_date_time": as_timestamp(answer.ans_date_time),
    })
    repo.push("questions", qid, "answers", saved["id"], front=True)
    account = repo.find_one("accounts", username=answer.ans_by)
    if account is not None:
        repo.push("accounts", account["id"], "answers", saved["id"])

    logger.info("Answer #%s added to question #%s", saved["id"], qid)
    await broadcaster.emit("answerUpdate", {"qid": qid, "answer": saved})
    return saved


async def _add_comment(table, doc_id, comment, repo, broadcaster):
    saved = repo.insert("comments", {
        "text": comment.text,
        "comment_by": comment.comment_by,
        "comment_date_time": as_timestamp(comment.comment_date_time),
    })
    updated = repo.push(table, doc_id, "comments", saved["id"])
    relations = QUESTION_RELATIONS if table == "questions" else ["comments"]
    result = repo.populate(table, updated, relations)
    kind = "question" if table == "questions" else "answer"
    await broadcaster.emit("commentUpdate", {"result": result, "type": kind})
    return saved


@app.post("/questions/{qid}/comments")
async def comment_on_question(
    qid: int,
    comment: CommentCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Comment on a question."""
    if repo.get("questions", qid) is None:
        raise HTTPException(404, "Question not found")
    return await _add_comment("questions", qid, comment, repo, broadcaster)


@app.post("/answers/{aid}/comments")
async def comment_on_answer(
    aid: int,
    comment: CommentCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Comment on an answer."""
    if repo.get("answers", aid) is None:
        raise HTTPException(404, "Answer not found")
    return await _add_comment("answers", aid, comment, repo, broadcaster)
