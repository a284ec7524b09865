import uvicorn

from apiguard.config import settings


def main() -> None:
    uvicorn.run(
        "apiguard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
