"""
Vercel Flask entrypoint at repo root.
Vercel looks for api/app.py; this file loads the app from backend/api.py.
"""
import sys
from pathlib import Path

# Put backend first on the path so "api" resolves to backend/api.py and
# backend/exam_results/* can be imported
_backend = Path(__file__).resolve().parent.parent / "backend"
sys.path.insert(0, str(_backend))

from api import app  # noqa: E402
