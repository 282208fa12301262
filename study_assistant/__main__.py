"""Run the study assistant with uvicorn: ``python -m study_assistant``."""

import uvicorn

from study_assistant.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "study_assistant.main:app",
        host="127.0.0.1",
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
