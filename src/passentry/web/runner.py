"""Uvicorn server runner with custom configuration."""

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from passentry.app import App
from passentry.config import Config
from passentry.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Run the Uvicorn server with custom logging configuration."""
    fastapi_app = create_fastapi_app(app, config)

    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"

    logger.info("server_starting", host=config.host, port=config.port, entry_enabled=config.entry.enabled)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=log_config,
        # Request lines of redemption links carry the entry key in the query string
        access_log=config.debug or not config.entry.enabled,
        proxy_headers=True,
    )
