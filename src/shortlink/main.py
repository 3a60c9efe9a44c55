"""Entry point of the ``shortlink`` console script."""

import structlog

from shortlink.app import App
from shortlink.config import Config
from shortlink.logging import setup_logging
from shortlink.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    structlog.get_logger(__name__).info(
        "starting",
        host=config.host,
        port=config.port,
        shortcode_length=config.shortcode_length,
        id_space=len(config.shortcode_universe) ** config.shortcode_length,
    )
    run_server(App(config), config)


if __name__ == "__main__":
    main()
