"""Uvicorn runner for the API and the redirect endpoint."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from shortlink.app import App
from shortlink.config import Config
from shortlink.web.server import create_fastapi_app


def build_log_config() -> dict[str, Any]:
    """Uvicorn's logging config with one-line access records (method, path, status)."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s %(client_addr)s "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s %(levelname)s %(message)s"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(),
        access_log=True,
        # Secure cookies are served behind a TLS-terminating proxy
        proxy_headers=config.secure_cookies,
    )
