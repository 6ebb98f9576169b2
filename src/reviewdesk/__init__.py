"""ReviewDesk - annotated review of student writing.

Teachers upload student documents, annotate ranges of the text, and attach
AI-generated or hand-written feedback; students read the result.
"""

from __future__ import annotations

import logging
import os
import subprocess
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def get_git_commit() -> str:
    """Get the short git commit hash, or 'unknown' if not in a git repo."""
    try:
        result = subprocess.run(  # nosec: B603, B607
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
        return result.stdout.strip()
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
    ):
        return "unknown"


def get_version_string() -> str:
    """Get version string with git commit for dev builds."""
    return f"{__version__}+{get_git_commit()}"


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"reviewdesk.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the ReviewDesk application."""
    from nicegui import app, ui

    from reviewdesk.config import get_settings
    from reviewdesk.pages import register_pages
    from reviewdesk.services import build_services

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    # Serve the viewer script and annotation styles
    static_dir = Path(__file__).parent / "static"
    app.add_static_files("/static", str(static_dir))

    services = build_services(settings)
    register_pages(services)

    @app.on_startup
    async def startup() -> None:
        await services.startup()
        logging.getLogger(__name__).info("Services ready")

    @app.on_shutdown
    async def shutdown() -> None:
        await services.shutdown()

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    print(f"ReviewDesk v{get_version_string()}")
    print(f"Starting application on http://0.0.0.0:{port}")

    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        reload=settings.dev.reload,
        storage_secret=storage_secret,
        title="ReviewDesk",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
