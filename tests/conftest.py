"""Shared test configuration.

The settings are read when ``app.infrastructure.database`` is first imported,
so the environment is prepared here before any test module imports the app.
"""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(__file__).parent / "test.db"

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["APP_TIMEZONE"] = "UTC"
