"""Pytest bootstrap for project imports."""

import os
import sys
import tempfile
from pathlib import Path

# Keep the app from touching ./participium.db or ./uploads when main is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="participium-uploads-"))

# Ensure project root is on sys.path so `import participium` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest  # noqa: E402

from helpers import build_session  # noqa: E402


@pytest.fixture
def db_session():
    db = build_session()
    try:
        yield db
    finally:
        db.close()
