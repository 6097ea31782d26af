"""``kota serve``: the HTTP API over one shared context."""

import logging

import typer
import uvicorn

from kota.api import create_app
from kota.core.context import SharedContext
from kota.utils.config import Config
from kota.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def build_server(
    config: Config, host: str | None = None, port: int | None = None
) -> uvicorn.Server:
    """Uvicorn server for the API; CLI flags override ``config.api``."""
    app = create_app(SharedContext(config))
    server_config = uvicorn.Config(
        app,
        host=host or config.api.host,
        port=port or config.api.port,
        log_level=config.log_level.lower(),
    )
    return uvicorn.Server(server_config)


def serve_command(ctx: typer.Context, host: str | None, port: int | None) -> None:
    config = ctx.obj.get("config")
    setup_logging(config, console_output=True)

    server = build_server(config, host, port)
    url = f"http://{server.config.host}:{server.config.port}"
    logger.info(f"Serving API at {url} for workspace {config.workspace}")
    if config.api.allow_tool_dispatch:
        logger.warning("POST /tools/{name} is enabled; any client can run tools")
    typer.echo(f"Starting kota API on {url}")
    typer.echo("Press Ctrl+C to stop")
    server.run()
