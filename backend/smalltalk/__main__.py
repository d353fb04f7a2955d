import uvicorn

from smalltalk.core.config import settings


def main() -> None:
    uvicorn.run(
        "smalltalk.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
