"""Serve the schedule API: ``python -m baby_easy_schedule`` or ``baby-easy-schedule``."""

import uvicorn

from baby_easy_schedule.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "baby_easy_schedule.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
