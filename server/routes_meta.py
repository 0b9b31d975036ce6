"""FakeSO: tags, stats, health and the live update socket."""

from datetime import datetime, timezone
from typing import List

from broadcast import Broadcaster, get_broadcaster
from config import app
from db import COLUMNS
from fastapi import Depends, HTTPException, WebSocket, WebSocketDisconnect
from models import TagCount, TagResponse
from repository import Repository, get_repository


@app.get("/")
async def root():
    return {"status": "ok", "service": "fakeso", "version": "1.0.0"}


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/tags", response_model=List[TagCount])
async def list_tags(repo: Repository = Depends(get_repository)):
    """Every tag with the number of questions using it."""
    counts = {t["name"]: 0 for t in repo.find("tags")}
    questions = repo.populate_many("questions", repo.find("questions"), ["tags"])
    for q in questions:
        for tag in q["tags"]:
            counts[tag["name"]] = counts.get(tag["name"], 0) + 1
    return [TagCount(name=name, qcnt=count) for name, count in counts.items()]


@app.get("/tags/{name}", response_model=TagResponse)
async def get_tag(name: str, repo: Repository = Depends(get_repository)):
    tag = repo.find_one("tags", name=name)
    if tag is None:
        raise HTTPException(404, "Tag not found")
    return tag


@app.get("/stats")
async def get_stats(
    repo: Repository = Depends(get_repository),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Record counts per collection."""
    stats = {f"total_{table}": repo.count(table) for table in COLUMNS}
    stats["connected_clients"] = broadcaster.client_count
    return stats


@app.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """Clients only listen; incoming frames are ignored."""
    broadcaster = websocket.app.state.broadcaster
    await broadcaster.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        broadcaster.disconnect(websocket)
