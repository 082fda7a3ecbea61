"""CLI entry point for devops-agent.

This module provides the command-line interface for starting the agent
server. It can be invoked as `devops-agent` (via the script entry point) or
`python -m devops_agent`.
"""

import argparse
import logging
import os
import sys

import uvicorn

from devops_agent import __version__, create_app
from devops_agent.config import CONFIG_FILE_ENV, AgentSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    """Main entry point for the devops-agent CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="devops-agent",
        description="Tool-calling DevOps assistant over multiple LLM providers and MCP servers",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"devops-agent {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via DEVOPS_AGENT_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via DEVOPS_AGENT_PORT)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to the YAML config file (default: config.yaml, can be set via {CONFIG_FILE_ENV})",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via DEVOPS_AGENT_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    if args.config is not None:
        os.environ[CONFIG_FILE_ENV] = args.config

    # Build settings, CLI args override environment variables and the config file
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = AgentSettings(**settings_kwargs)

    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    if args.reload:
        # The reloader imports the app itself, so overrides travel via the environment
        if args.log_level is not None:
            os.environ["DEVOPS_AGENT_LOG_LEVEL"] = args.log_level
        uvicorn.run(
            "devops_agent.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=True,
        )
        return

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
