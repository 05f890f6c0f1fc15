"""Run a standalone fake server: ``python -m fake_cloudwatch_logs``."""

import uvicorn

from fake_cloudwatch_logs.app.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "fake_cloudwatch_logs.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port or 4566,
        log_level=settings.log_level,
    )
