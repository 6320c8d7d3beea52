"""
--------------------------------------------------------------------------------
<cycmeco project>

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the 'cycmeco' logger: Rich console handler plus an optional log file."""
    logger = logging.getLogger("cycmeco")
    logger.handlers.clear()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(fh)

    sh = RichHandler(
        console=console or Console(stderr=True),
        markup=False,
        rich_tracebacks=True,
        show_level=True,
        show_time=False,
        show_path=False,
    )
    logger.addHandler(sh)
    return logger
