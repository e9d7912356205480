import uvicorn

from mediastore.logging import configure_logging
from mediastore.settings import settings


def main() -> None:
    configure_logging()
    # log_config=None keeps uvicorn on the handlers installed above.
    uvicorn.run("web.app:app", host=settings.web_host, port=settings.web_port, log_config=None)


if __name__ == "__main__":
    main()
