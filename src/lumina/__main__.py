from __future__ import annotations

import logging

import uvicorn

from .settings import load_settings


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.env.lumina_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "lumina.main:app",
        host=settings.yaml.server.host,
        port=settings.yaml.server.port,
        log_level=settings.env.lumina_log_level.lower(),
    )


if __name__ == "__main__":
    main()
