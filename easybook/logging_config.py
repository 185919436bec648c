# easybook/logging_config.py
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", logfile: Optional[Path] = None) -> None:
    """
    Configure the root logger once: rich console handler on stderr plus an optional file handler.
    Repeated calls (tests, several CLI invocations in one process) only adjust the level.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if root.handlers:
        return

    console_handler = RichHandler(console=Console(stderr=True), show_path=False)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(console_handler)

    if logfile:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(logfile, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root.addHandler(file_handler)
