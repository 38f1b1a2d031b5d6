"""Run the API with uvicorn: ``python -m task_api``."""

import logging

import uvicorn

from task_api.core.config import settings
from task_api.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging()
    logger.info("Starting server on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "task_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
