"""
start the proxy with uvicorn
"""
import uvicorn

from portfolio_proxy.config import settings
from portfolio_proxy.logger import configure_logging, get_logger


def main() -> None:
    configure_logging()
    logger = get_logger("run")
    logger.info("starting server", host=settings.host, port=settings.port)

    uvicorn.run(
        "portfolio_proxy.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
