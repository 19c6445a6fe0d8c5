"""Backend server entrypoint."""

import logging

import uvicorn

from shared import config


def configure_logging() -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=config.log_level(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    configure_logging()
    uvicorn.run("backend.api:app", host="0.0.0.0", port=config.port())


if __name__ == "__main__":
    main()
