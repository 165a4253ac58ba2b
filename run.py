#!/usr/bin/env python3
"""
Calendar server launcher.

    python run.py --action server [--host H] [--port P] [--reload] [-v|-d]
    python run.py --action config
    python run.py --action info

The server action runs uvicorn in a child process; PORT in the environment
(or config/.env) picks the port when --port is not given.
"""

import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from calendar_server.core.logging import get_logger, setup_logging

ASGI_APP = "calendar_server.main:app"


def validate_project_root() -> Path:
    """Exit with status 1 unless run.py sits next to .project_root."""
    if (PROJECT_ROOT / ".project_root").exists():
        return PROJECT_ROOT
    click.secho("Error: .project_root not found. Run from project root.", fg="red", err=True)
    sys.exit(1)


def _log_level(verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    return "INFO" if verbose else "WARNING"


def build_server_command(host: str, port: int, drain_seconds: int, reload: bool) -> list[str]:
    """uvicorn argv for the calendar app."""
    cmd = [
        sys.executable, "-m", "uvicorn", ASGI_APP,
        "--host", host,
        "--port", str(port),
        "--timeout-graceful-shutdown", str(drain_seconds),
    ]
    if reload:
        cmd.append("--reload")
    return cmd


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """
    Start uvicorn and block until it exits.

    On SIGINT / SIGTERM uvicorn stops accepting connections and gives
    in-flight requests shutdown.drain_seconds to finish.
    """
    from calendar_server.core.config import get_app_config, get_server_address

    default_host, default_port = get_server_address()
    host = default_host if host is None else host
    port = default_port if port is None else port
    drain_seconds = get_app_config().concurrency.shutdown.drain_seconds

    logger.info(
        "Starting server",
        extra={"host": host, "port": port, "reload": reload, "drain_seconds": drain_seconds},
    )
    click.echo(f"Listening on http://{host}:{port} (Ctrl+C to stop)\n")

    try:
        subprocess.run(build_server_command(host, port, drain_seconds, reload), check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _echo_tree(values: dict, depth: int = 1) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{'  ' * depth}{key}:")
            _echo_tree(value, depth + 1)
        else:
            click.echo(f"{'  ' * depth}{key}: {value}")


def show_config(logger) -> None:
    """Print every YAML section plus the address and level actually in effect."""
    try:
        from calendar_server.core.config import get_app_config, get_log_level, get_server_address

        app_config = get_app_config()
        host, port = get_server_address()
        sections = {
            "Application Settings (from YAML)": app_config.application.model_dump(),
            "Logging Settings (from YAML)": app_config.logging.model_dump(),
            "Concurrency Settings (from YAML)": app_config.concurrency.model_dump(),
            "Effective Server Settings": {"host": host, "port": port, "log_level": get_log_level()},
        }
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.secho(f"Error loading configuration: {e}", fg="red")
        sys.exit(1)

    for title, values in sections.items():
        click.echo(f"{title}:")
        _echo_tree(values)
        click.echo()
    logger.info("Configuration displayed")


USAGE = """\
Available Actions:
  --action server   Start the HTTP server
  --action config   Display configuration
  --action info     Show this information

Logging Options:
  --verbose, -v     INFO level logging
  --debug, -d       DEBUG level logging

Examples:
  python run.py --action server --reload --verbose
  PORT=9090 python run.py --action server
"""


def show_info(logger) -> None:
    """Print name and version, then the available actions."""
    try:
        from calendar_server.core.config import get_app_config

        application = get_app_config().application
        click.echo(f"{application.name} {application.version}")
        click.echo(application.description)
    except Exception as e:
        logger.warning("Could not load configuration", extra={"error": str(e)})
        click.echo("Calendar Server")
    click.echo()
    click.echo(USAGE)


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "config", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Bind address (server action).")
@click.option(
    "--port",
    default=None,
    type=int,
    help="Bind port (server action). Defaults to $PORT, then 8080.",
)
@click.option("--reload", is_flag=True, help="Restart on code changes (server action).")
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    Calendar Server Entry Point.

    Run the HTTP server, print the loaded configuration, or show usage.
    """
    validate_project_root()

    log_level = _log_level(verbose, debug)
    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)
    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "config":
        show_config(logger)
    else:
        show_info(logger)


if __name__ == "__main__":
    main()
