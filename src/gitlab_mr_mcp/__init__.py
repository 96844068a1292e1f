"""MCP server for GitLab merge request review."""

import asyncio
import os

import click
from dotenv import load_dotenv

from .config import TRANSPORTS, GitLabConfig, ServerConfig
from .exceptions import GitLabConfigError
from .telemetry import configure_logging, get_logger


@click.command()
@click.option(
    "--transport",
    type=click.Choice(list(TRANSPORTS)),
    default=None,
    help="MCP transport type (default: stdio, or streamable-http when a port is set)",
)
@click.option(
    "--http-port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Serve over streamable HTTP on this port",
)
@click.option("--host", default=None, help="Host for the HTTP transport")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a config.toml file",
)
@click.option("--gitlab-url", envvar="GITLAB_URL", help="GitLab instance URL")
@click.option("--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab personal access token")
def main(
    transport: str | None,
    http_port: int | None,
    host: str | None,
    config_path: str | None,
    gitlab_url: str | None,
    gitlab_token: str | None,
) -> None:
    """Run the GitLab merge request MCP server."""
    load_dotenv()

    if gitlab_url:
        os.environ["GITLAB_URL"] = gitlab_url
    if gitlab_token:
        os.environ["GITLAB_TOKEN"] = gitlab_token

    try:
        server_config = ServerConfig.load(
            transport=transport, http_port=http_port, host=host, config_path=config_path
        )
        GitLabConfig.from_env().validate()
        configure_logging(server_config.telemetry)
    except GitLabConfigError as e:
        raise click.ClickException(str(e)) from e

    logger = get_logger(__name__)
    from .servers import prompts  # noqa: F401  registers decorators
    from .servers.gitlab import mcp

    run_kwargs: dict = {"transport": server_config.transport}
    if server_config.transport != "stdio":
        run_kwargs["host"] = server_config.host
        run_kwargs["port"] = server_config.port
        logger.info(
            "server_starting",
            name=server_config.name,
            url=f"http://{server_config.host}:{server_config.port}",
        )
    else:
        logger.info("server_starting", name=server_config.name, transport="stdio")

    try:
        asyncio.run(mcp.run_async(show_banner=False, **run_kwargs))
    except KeyboardInterrupt:
        logger.info("shutdown_signal_received")
    logger.info("server_stopped")


if __name__ == "__main__":
    main()
