"""Run the API with uvicorn: ``python -m shortener``."""

import uvicorn

from shortener.core.logging import setup_logging
from shortener.core.setting import settings


def main() -> None:
    setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    uvicorn.run(
        "shortener.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # keep the handlers installed by setup_logging
    )


if __name__ == "__main__":
    main()
