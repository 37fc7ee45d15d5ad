from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "tottrot-secret-change-in-production")
    favorites_namespace: str = "tottrot.favorites"
    # Used for share links; falls back to the request's base URL when empty
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "")


DEFAULT_APP_CONFIG = AppConfig()
