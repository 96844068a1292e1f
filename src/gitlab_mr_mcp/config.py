"""GitLab MR MCP server configuration."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import GitLabConfigError

SERVER_NAME = "gitlab-mr-mcp"
TRANSPORTS = ("stdio", "streamable-http")
LOG_FORMATS = ("pretty", "json")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
DEFAULT_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 8000
DEFAULT_CONFIG_PATHS = ("config.toml", "/config.toml")
STDIO_LOG_FILE = f"/tmp/{SERVER_NAME}.log"


@dataclass
class GitLabConfig:
    """GitLab connection settings, loaded from environment variables."""

    url: str = ""
    token: str = ""
    timeout: float | None = None
    ssl_verify: bool = True

    @classmethod
    def from_env(cls) -> GitLabConfig:
        url = os.getenv("GITLAB_URL", "").strip()
        token = os.getenv("GITLAB_TOKEN", "")
        raw_timeout = os.getenv("GITLAB_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else None
        except ValueError as e:
            msg = f"GITLAB_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            raise GitLabConfigError(msg) from e
        ssl_verify = os.getenv("GITLAB_SSL_VERIFY", "true").lower() not in (
            "false",
            "0",
            "no",
        )

        return cls(url=url, token=token, timeout=timeout, ssl_verify=ssl_verify)

    @property
    def api_url(self) -> str:
        """Base URL of the REST API, always ending in ``/api/v4``."""
        trimmed = self.url.strip().rstrip("/")
        if trimmed.endswith("/api/v4"):
            return trimmed
        if trimmed.endswith("/api"):
            return f"{trimmed}/v4"
        return f"{trimmed}/api/v4"

    def validate(self) -> None:
        if not self.url.strip():
            msg = "GITLAB_URL environment variable is required and must not be empty"
            raise GitLabConfigError(msg)
        if not self.token.strip():
            msg = "GITLAB_TOKEN environment variable is required and must not be empty"
            raise GitLabConfigError(msg)


@dataclass
class TelemetryConfig:
    level: str = "info"
    format: str = "pretty"
    file: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.level, str) or self.level.lower() not in LOG_LEVELS:
            msg = f"Unsupported telemetry level {self.level!r}; expected one of {LOG_LEVELS}"
            raise GitLabConfigError(msg)
        if self.format not in LOG_FORMATS:
            msg = f"Unsupported telemetry format {self.format!r}; expected one of {LOG_FORMATS}"
            raise GitLabConfigError(msg)
        self.level = self.level.lower()


@dataclass
class ServerConfig:
    """Transport and logging settings for the server process."""

    name: str = SERVER_NAME
    transport: str = "stdio"
    host: str = DEFAULT_HOST
    port: int | None = None
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)

    @classmethod
    def load(
        cls,
        *,
        transport: str | None = None,
        http_port: int | None = None,
        host: str | None = None,
        config_path: str | None = None,
    ) -> ServerConfig:
        """Resolve settings from a TOML file or the environment, then apply CLI overrides.

        Without a config file, ``http_port`` selects HTTP streaming, then a
        ``PORT`` environment value does, otherwise stdio is used.
        """
        path = _find_config_file(config_path)
        if path is not None:
            config = cls._from_file(path)
        else:
            config = cls._from_env()

        if http_port is not None:
            config.port = http_port
            if transport is None:
                config.transport = "streamable-http"
        if transport is not None:
            config.transport = transport
        if host is not None:
            config.host = host

        if config.transport not in TRANSPORTS:
            msg = f"Unsupported transport {config.transport!r}; expected one of {TRANSPORTS}"
            raise GitLabConfigError(msg)
        if config.transport == "streamable-http" and config.port is None:
            config.port = DEFAULT_HTTP_PORT
        # stdout is reserved for the protocol on stdio
        if config.transport == "stdio" and not config.telemetry.file:
            config.telemetry.file = STDIO_LOG_FILE
        return config

    @classmethod
    def _from_env(cls) -> ServerConfig:
        port = _parse_port(os.getenv("PORT"), "PORT")
        telemetry = TelemetryConfig(
            level=os.getenv("MCP_TELEMETRY_LEVEL", "info"),
            format="json" if os.getenv("MCP_TELEMETRY_FORMAT") == "json" else "pretty",
        )
        return cls(
            transport="streamable-http" if port is not None else "stdio",
            port=port,
            telemetry=telemetry,
        )

    @classmethod
    def _from_file(cls, path: Path) -> ServerConfig:
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid config file {path}: {e}"
            raise GitLabConfigError(msg) from e

        server: dict[str, Any] = data.get("server", {})
        telemetry: dict[str, Any] = data.get("telemetry", {})

        transport = server.get("transport", "stdio")
        port = server.get("port")
        # Tagged form: [server.transport.http-streaming] port = 8080
        if isinstance(transport, dict):
            if len(transport) != 1:
                msg = f"server.transport must name exactly one transport, got {list(transport)}"
                raise GitLabConfigError(msg)
            transport, options = next(iter(transport.items()))
            if isinstance(options, dict):
                port = options.get("port", port)
        if transport == "http-streaming":
            transport = "streamable-http"

        return cls(
            name=server.get("name", SERVER_NAME),
            transport=transport,
            host=server.get("host", DEFAULT_HOST),
            port=_parse_port(port, "server.port"),
            telemetry=TelemetryConfig(
                level=telemetry.get("level", "info"),
                format=telemetry.get("format", "pretty"),
                file=telemetry.get("file"),
            ),
        )


def _find_config_file(config_path: str | None) -> Path | None:
    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            msg = f"Config file not found: {config_path}"
            raise GitLabConfigError(msg)
        return path
    for candidate in DEFAULT_CONFIG_PATHS:
        path = Path(candidate)
        if path.is_file():
            return path
    return None


def _parse_port(value: Any, source: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        msg = f"{source} must be an integer between 1 and 65535, got {value!r}"
        raise GitLabConfigError(msg) from e
    if not 1 <= port <= 65535:
        msg = f"{source} must be an integer between 1 and 65535, got {value!r}"
        raise GitLabConfigError(msg)
    return port
