import logging
import sys
from pathlib import Path
from typing import Optional, Union

# Logger of the per-match progress messages
ENGINE_LOGGER = "seeded_draw.draw.engine"

DRAW_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    draw_progress: bool = True
) -> logging.Logger:
    """
    Configure the root logger for a draw session.

    Args:
        level: Logging level (string or logging constant)
        log_file: Optional file the session is also written to
        console: Whether to log to stdout
        draw_progress: Whether the engine reports every drawn match; when
            False the engine logger only lets warnings through

    Returns:
        The root logger

    Raises:
        ValueError: If ``level`` is not a known level name
    """
    if isinstance(level, str):
        level_name = level.upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level_name}")

    formatter = logging.Formatter(DRAW_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    engine_level = logging.NOTSET if draw_progress else logging.WARNING
    logging.getLogger(ENGINE_LOGGER).setLevel(engine_level)

    return root
