"""Service entry point."""

import uvicorn
from dotenv import load_dotenv

from relayer_discovery.api.app import create_app
from relayer_discovery.config.settings import load_settings_or_exit
from relayer_discovery.observability.logging.config import get_logger, setup_logging


def main() -> None:
    """Validate configuration, then serve the status API."""
    load_dotenv()
    settings = load_settings_or_exit()
    setup_logging(
        level=settings.observability.log_level,
        format_type=settings.observability.log_format,
    )

    logger = get_logger(__name__)
    logger.info("Starting relayer discovery service", host=settings.host, port=settings.port)

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.observability.log_level.value.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
