"""Root conftest: shared test configuration."""

import os

# Keep tests off any real database or production secret
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.setdefault("LOG_FORMAT", "text")
