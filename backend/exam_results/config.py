"""
Configuration
Loads settings from environment variables (.env file) once at startup.

Environment variables:
PORT=3000
GOOGLE_SHEET_ID=your_sheet_id
GOOGLE_SHEETS_API_KEY=your_api_key
SHEET_RANGE=Sheet1!A1:Z100
APP_ENV=production            # "development" adds error details to 500 responses
CORS_ORIGINS=*                # comma-separated list of allowed origins
DEFAULT_SCHOOL=PM SHRI KENDRIYA VIDYALAYA RAEBARELI
SHEETS_TIMEOUT_SECONDS=       # empty = no timeout
RESULTS_LOGS_DIR=             # empty = backend/logs
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 3000
DEFAULT_SHEET_RANGE = "Sheet1!A1:Z100"
DEFAULT_SCHOOL = "PM SHRI KENDRIYA VIDYALAYA RAEBARELI"


@dataclass(frozen=True)
class Settings:
    sheet_id: str = ""
    api_key: str = ""
    port: int = DEFAULT_PORT
    sheet_range: str = DEFAULT_SHEET_RANGE
    environment: str = "production"
    cors_origins: Tuple[str, ...] = ("*",)
    default_school: str = DEFAULT_SCHOOL
    timeout: Optional[float] = None
    logs_dir: Path = BACKEND_DIR / "logs"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def _resolve_logs_dir(env: Mapping[str, str]) -> Path:
    # Vercel's deployment filesystem is read-only; only /tmp is writable.
    if env.get("RESULTS_LOGS_DIR"):
        return Path(env["RESULTS_LOGS_DIR"])
    if env.get("VERCEL"):
        return Path("/tmp/exam_results_logs")
    return BACKEND_DIR / "logs"


def _parse_port(value: Optional[str]) -> int:
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        print(f"Warning: Invalid PORT value: {value}. Using default: {DEFAULT_PORT}")
        return DEFAULT_PORT
    if not 0 < port < 65536:
        print(f"Warning: PORT {port} out of range. Using default: {DEFAULT_PORT}")
        return DEFAULT_PORT
    return port


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        print(f"Warning: Invalid SHEETS_TIMEOUT_SECONDS value: {value}. No timeout will be used")
        return None
    if timeout <= 0:
        print(f"Warning: SHEETS_TIMEOUT_SECONDS must be positive, got {value}. No timeout will be used")
        return None
    return timeout


def _parse_origins(value: Optional[str]) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in (value or "*").split(",") if o.strip())
    return origins or ("*",)


def load_settings(env: Optional[Mapping[str, str]] = None, env_file: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: mapping to read from. If None, loads backend/.env into os.environ
             and reads os.environ.
        env_file: optional .env path, only used when env is None

    Returns:
        Settings
    """
    if env is None:
        env_path = Path(env_file) if env_file is not None else BACKEND_DIR / ".env"
        if env_path.exists():
            load_dotenv(env_path)
        else:
            print(f"Warning: .env file not found at {env_path}")
            print("Falling back to process environment variables")
        env = os.environ

    sheet_id = (env.get("GOOGLE_SHEET_ID") or "").strip()
    api_key = (env.get("GOOGLE_SHEETS_API_KEY") or "").strip()

    missing = []
    if not sheet_id:
        missing.append("GOOGLE_SHEET_ID")
    if not api_key:
        missing.append("GOOGLE_SHEETS_API_KEY")
    if missing:
        print(f"Warning: missing configuration: {', '.join(missing)}")
        print("Exam result lookups will fail until these are set")

    return Settings(
        sheet_id=sheet_id,
        api_key=api_key,
        port=_parse_port(env.get("PORT")),
        sheet_range=(env.get("SHEET_RANGE") or DEFAULT_SHEET_RANGE).strip(),
        environment=(env.get("APP_ENV") or "production").strip().lower(),
        cors_origins=_parse_origins(env.get("CORS_ORIGINS")),
        default_school=(env.get("DEFAULT_SCHOOL") or DEFAULT_SCHOOL).strip(),
        timeout=_parse_timeout(env.get("SHEETS_TIMEOUT_SECONDS")),
        logs_dir=_resolve_logs_dir(env),
    )
