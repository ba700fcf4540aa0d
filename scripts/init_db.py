#!/usr/bin/env python3
"""Create (or recreate) the bookkeeping schema on the configured database."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bizbooks.core.config import get_settings  # noqa: E402
from bizbooks.core.log import get_logger, init_logging, shutdown_logging  # noqa: E402
from bizbooks.db import create_sync_engine  # noqa: E402
from bizbooks.db.schema import init_database  # noqa: E402

logger = get_logger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop every existing table before creating the schema",
    )
    args = parser.parse_args()

    server = get_settings().server
    init_logging(level=server.log_level, log_dir=server.log_dir)
    engine = create_sync_engine()
    try:
        tables = init_database(engine, drop_existing=args.drop)
        logger.info("Tables: %s", ", ".join(tables))
    finally:
        engine.dispose()
        shutdown_logging()


if __name__ == "__main__":
    main()
