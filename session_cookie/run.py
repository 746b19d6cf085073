#!/usr/bin/env python3
"""Run the session-cookie demo application"""
import uvicorn

from session_cookie.core.config import settings


def main() -> None:
    uvicorn.run(
        "session_cookie.main:get_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
