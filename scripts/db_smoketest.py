"""Simple database connectivity check."""
from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bizbooks.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from bizbooks.db import UnitOfWork, get_sessionmaker  # noqa: E402

settings = get_settings()


def main() -> None:
    factory = get_sessionmaker()
    try:
        with UnitOfWork(factory) as session:
            session.execute(text("SELECT 1"))
            backend = session.get_bind().dialect.name
        print(f"✅ Connected to {settings.database.masked_url} ({backend})")
    finally:
        factory.kw["bind"].dispose()


if __name__ == "__main__":
    main()
