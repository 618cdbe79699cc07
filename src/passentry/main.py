"""Application entry point for the passentry server."""

from passentry.app import App
from passentry.config import Config
from passentry.logging import setup_logging
from passentry.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
