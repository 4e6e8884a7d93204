#!/usr/bin/env python3
"""
newsdesk command line.

    python cli.py --service server --reload -v   serve the forms
    python cli.py --service config               print effective settings
    python cli.py --service test --test-type unit
    python cli.py                                what is installed, and how to run it
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import structlog

PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from newsdesk.core.logging import get_logger, setup_logging

APP_TARGET = "newsdesk.web.main:app"
TEST_DIRS = {"all": "tests", "unit": "tests/unit", "integration": "tests/integration"}


def _fail(message: str, code: int = 1) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)


def _section(title: str, values: dict[str, Any], indent: int = 2) -> None:
    if indent == 2:
        click.echo(f"\n{title}")
        click.echo("-" * len(title))
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _section(title, value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def run_server(logger: Any, host: str | None, port: int | None, reload: bool, **_: Any) -> None:
    """Serve pages and API with uvicorn."""
    import uvicorn

    from newsdesk.core.config import get_app_config

    try:
        server = get_app_config().application.server
    except (OSError, ValueError) as e:
        logger.error("Settings could not be loaded", extra={"error": str(e)})
        _fail(f"config/settings is invalid: {e}")

    host = host or server.host
    port = port or server.port
    logger.info("Starting server", extra={"host": host, "port": port, "reload": reload})
    click.echo(f"Serving {APP_TARGET} on http://{host}:{port} (Ctrl+C stops)")

    uvicorn.run(APP_TARGET, host=host, port=port, reload=reload, log_config=None)


def show_config(logger: Any, **_: Any) -> None:
    """Effective settings. The token fragment is reported as set/empty only."""
    from newsdesk.core.config import get_app_config, get_backend_base_url, get_base_path, get_settings

    try:
        app_config = get_app_config()
        settings = get_settings()
    except (OSError, ValueError) as e:
        logger.error("Settings could not be loaded", extra={"error": str(e)})
        _fail(str(e))

    for name in app_config.files:
        _section(f"{name}.yaml", getattr(app_config, name).model_dump())
    _section(
        "environment (config/.env)",
        {
            "STRAPI_TOKEN": "set" if settings.strapi_token else "empty",
            "STRAPI_ENDPOINT": settings.strapi_endpoint or "(not set)",
            "BASE_PATH": settings.base_path if settings.base_path is not None else "(not set)",
        },
    )
    _section("effective", {"backend": get_backend_base_url(), "base path": get_base_path() or "/"})


def run_tests(logger: Any, test_type: str, coverage: bool, **_: Any) -> None:
    """pytest in a child process; exits with its status."""
    cmd = [sys.executable, "-m", "pytest", TEST_DIRS[test_type], "-v"]
    if coverage:
        cmd += ["--cov=newsdesk", "--cov-report=term-missing"]

    logger.info("Running tests", extra={"cmd": cmd})
    click.echo(" ".join(cmd))
    sys.exit(subprocess.run(cmd, cwd=PROJECT_ROOT).returncode)


def show_info(logger: Any, **_: Any) -> None:
    """Name, version and the available services."""
    from newsdesk.core.config import get_app_config

    try:
        app = get_app_config().application
    except (OSError, ValueError) as e:
        _fail(f"application.yaml could not be loaded: {e}")

    click.echo(f"{app.name} {app.version}")
    click.echo(app.description)
    click.echo("\nServices (--service):")
    for name, handler in SERVICES.items():
        click.echo(f"  {name:<8} {handler.__doc__.splitlines()[0]}")


SERVICES: dict[str, Callable[..., None]] = {
    "server": run_server,
    "config": show_config,
    "test": run_tests,
    "info": show_info,
}


@click.command()
@click.option("--service", "-s", type=click.Choice(list(SERVICES)), default="info", show_default=True,
              help="What to run.")
@click.option("--verbose", "-v", is_flag=True, help="Log at INFO.")
@click.option("--debug", "-d", is_flag=True, help="Log at DEBUG.")
@click.option("--host", default=None, help="Bind address (server).")
@click.option("--port", default=None, type=int, help="Port (server).")
@click.option("--reload", is_flag=True, help="Restart on code changes (server).")
@click.option("--test-type", type=click.Choice(list(TEST_DIRS)), default="all", show_default=True,
              help="Which tests to run (test).")
@click.option("--coverage", is_flag=True, help="Collect coverage (test).")
def main(service: str, verbose: bool, debug: bool, **options: Any) -> None:
    """Run a newsdesk service."""
    if not (PROJECT_ROOT / ".project_root").exists():
        _fail(f".project_root not found in {PROJECT_ROOT}")

    level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=level, format_type="console", enable_file_logging=False)
    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "log_level": level})
    SERVICES[service](logger, **options)


if __name__ == "__main__":
    main()
