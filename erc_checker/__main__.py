import uvicorn

from erc_checker.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "erc_checker.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
