"""Run the API with uvicorn: ``python -m bizbooks``."""
from __future__ import annotations

import uvicorn

from bizbooks.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "bizbooks.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=not settings.server.is_production,
        log_level=settings.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
