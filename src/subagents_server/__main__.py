"""Server entry point for subagents-server.

This module starts the HTTP server. It can be invoked as `subagents-server`
(via the script entry point) or `python -m subagents_server`.
"""

import argparse
import sys

import uvicorn

from subagents_server import __version__, create_app
from subagents_server.config import SubAgentsSettings


def main() -> None:
    """Main entry point for the subagents-server command.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="subagents-server",
        description="Headless FastAPI server for managing installable agent definitions",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"subagents-server {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via SUBAGENTS_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via SUBAGENTS_PORT)",
    )

    parser.add_argument(
        "--project-dir",
        type=str,
        default=None,
        help="Project holding the local agents tier (default: ., can be set via SUBAGENTS_PROJECT_DIR)",
    )

    parser.add_argument(
        "--bundled-dir",
        type=str,
        default=None,
        help="Directory of bundled agents (can be set via SUBAGENTS_BUNDLED_AGENTS_DIR)",
    )

    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="Do not snapshot directories before installs and updates",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via SUBAGENTS_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.project_dir is not None:
        settings_kwargs["project_dir"] = args.project_dir
    if args.bundled_dir is not None:
        settings_kwargs["bundled_agents_dir"] = args.bundled_dir
    if args.no_backup:
        settings_kwargs["backup_before_install"] = False
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = SubAgentsSettings(**settings_kwargs)

    # Create the FastAPI app
    app = create_app(settings=settings)

    # Start uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    sys.exit(main())
