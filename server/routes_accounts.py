"""FakeSO: account, accessibility and profile endpoints."""

from __future__ import annotations

import logging
from typing import List

from broadcast import Broadcaster, get_broadcaster
from config import app
from db import now_iso
from fastapi import Depends, HTTPException
from models import (
    AccessibilitySettings,
    AccountCreate,
    AccountResponse,
    BioResponse,
    BioUpdate,
    LoginRequest,
)
from repository import Repository, get_repository
from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)


def _get_account(repo: Repository, username: str, missing: str = "Account not found") -> dict:
    account = repo.find_one("accounts", username=username)
    if account is None:
        raise HTTPException(404, missing)
    return account


async def _register(account: AccountCreate, repo, broadcaster) -> AccountResponse:
    if repo.find_one("accounts", email=account.email):
        raise HTTPException(400, "Email already in use")
    if repo.find_one("accounts", username=account.username):
        raise HTTPException(400, "Username already in use")

    # Accounts without a password come from single sign-on
    password = generate_password_hash(account.password) if account.password else ""
    saved = repo.insert("accounts", {
        "username": account.username,
        "email": account.email,
        "password": password,
        "created_at": now_iso(),
    })
    logger.info("Registered account %s", account.username)
    response = AccountResponse(**saved)
    await broadcaster.emit("accountUpdate", response)
    return response


@app.post("/accounts", response_model=AccountResponse)
async def create_account(
    account: AccountCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Register an account. Username and email must both be unused."""
    return await _register(account, repo, broadcaster)


@app.post("/accounts/find-or-create", response_model=AccountResponse)
async def find_or_create_account(
    account: AccountCreate,
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Return the account for this email, creating a password-less one if needed."""
    existing = repo.find_one("accounts", email=account.email)
    if existing is not None:
        return AccountResponse(**existing)
    return await _register(
        AccountCreate(username=account.username, email=account.email),
        repo, broadcaster,
    )


@app.post("/accounts/login", response_model=AccountResponse)
async def login(credentials: LoginRequest, repo: Repository = Depends(get_repository)):
    account = repo.find_one("accounts", username=credentials.username)
    if (
        account is None
        or not account["password"]
        or not check_password_hash(account["password"], credentials.password)
    ):
        raise HTTPException(401, "Invalid username or password")
    return AccountResponse(**account)


@app.get("/accounts/{username}/accessibility", response_model=AccessibilitySettings)
async def get_accessibility_settings(
    username: str, repo: Repository = Depends(get_repository)
):
    return _get_account(repo, username)["accessibility_settings"]


@app.put("/accounts/{username}/accessibility", response_model=AccessibilitySettings)
async def save_accessibility_settings(
    username: str,
    settings: AccessibilitySettings,
    repo: Repository = Depends(get_repository),
):
    account = _get_account(repo, username)
    updated = repo.update(
        "accounts", account["id"],
        color_blindness=settings.color_blindness,
        low_vision=int(settings.low_vision),
    )
    return updated["accessibility_settings"]


# --- Profiles ---


@app.get("/profile/{username}/bio", response_model=BioResponse)
async def get_bio(username: str, repo: Repository = Depends(get_repository)):
    account = _get_account(repo, username, "User not found")
    return BioResponse(username=account["username"], bio=account["bio"] or "")


@app.put("/profile/{username}/bio")
async def update_bio(
    username: str, body: BioUpdate, repo: Repository = Depends(get_repository)
):
    account = _get_account(repo, username, "User not found")
    updated = repo.update("accounts", account["id"], bio=body.bio)
    return {"msg": "Bio updated successfully", "user": AccountResponse(**updated)}


@app.get("/profile/{username}/questions")
async def get_user_questions(
    username: str, repo: Repository = Depends(get_repository)
) -> List[dict]:
    questions = repo.find("questions", asked_by=username)
    if not questions:
        raise HTTPException(404, "No questions found for this user")
    return repo.populate_many("questions", questions, ["tags"])


@app.get("/profile/{username}/answers")
async def get_user_answers(
    username: str, repo: Repository = Depends(get_repository)
) -> List[dict]:
    answers = repo.find("answers", ans_by=username)
    if not answers:
        raise HTTPException(404, "No answers found for this user")
    return answers
