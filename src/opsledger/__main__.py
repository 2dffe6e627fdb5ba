"""Entry point for running the application with uvicorn."""

import logging

import uvicorn

from opsledger.config import settings


def main() -> None:
    """Run the application."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "opsledger.api.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
