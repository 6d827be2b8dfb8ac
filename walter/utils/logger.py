import logging
import sys

from ..diagnostics import Colors

LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.CYAN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED + Colors.BOLD,
}


class LevelFormatter(logging.Formatter):
    """'[info] Compiling' with the level name coloured when writing to a terminal."""

    def __init__(self, color: bool = False, verbose: bool = False):
        fmt = "%(level)s %(name)s: %(message)s" if verbose else "%(level)s %(message)s"
        super().__init__(fmt)
        self.color = color

    def format(self, record):
        level = f"[{record.levelname.lower()}]"
        if self.color:
            level = f"{LEVEL_COLORS.get(record.levelno, '')}{level}{Colors.RESET}"
        record.level = level
        return super().format(record)


def init(verbose: bool = False, stream=None) -> logging.Logger:
    """Installs a single handler on the 'walter' logger hierarchy."""
    stream = stream or sys.stderr
    logger = logging.getLogger("walter")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LevelFormatter(color=hasattr(stream, "isatty") and stream.isatty(), verbose=verbose))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
