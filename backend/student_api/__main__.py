"""Run the service with uvicorn: ``python -m student_api``."""

import uvicorn

from .config import settings


def main():
    uvicorn.run("student_api.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
