"""
Logging setup for the command-line tools.

Call setup_logging() once at the entry point; modules use
logger = logging.getLogger(__name__).
"""
import logging
import sys
from pathlib import Path
from typing import Optional

_logging_configured = False


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[str] = None,
    format_string: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
) -> None:
    """Configure the root logger.

    Log records go to stderr so they never interleave with streamed search
    output on stdout. Only the first call has any effect.
    """
    global _logging_configured
    if _logging_configured:
        return

    formatter = logging.Formatter(format_string)
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    _logging_configured = True
