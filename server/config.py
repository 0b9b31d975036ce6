"""FakeSO: configuration and app setup."""

import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=os.environ.get("FAKESO_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(message)s",
)

_REPO_DIR = Path(__file__).parent.parent.resolve()
DATA_DIR = Path(
    os.environ.get("FAKESO_DATA_DIR", str(_REPO_DIR / "data"))
) / "fakeso"
DATA_DIR.mkdir(parents=True, exist_ok=True)
DB_PATH = DATA_DIR / "fakeso.db"

# Threads keep only the most recent messages
MAX_THREAD_MESSAGES = 300

app = FastAPI(title="FakeSO", version="1.0.0")

# CORS: allow the React dev server (configurable via env)
CLIENT_PORT = os.environ.get("FAKESO_CLIENT_PORT", "3000")
cors_origins = [
    f"http://localhost:{CLIENT_PORT}",
]
# Additional origins from env (comma-separated)
extra_origins = os.environ.get("FAKESO_CORS_ORIGINS", "")
if extra_origins:
    cors_origins.extend(o.strip() for o in extra_origins.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
