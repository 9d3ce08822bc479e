from __future__ import annotations

import logging

import uvicorn

from pokedex.config import load_settings

logger = logging.getLogger("pokedex")


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server running on %s", settings.public_base_url)
    uvicorn.run(
        "pokedex.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
