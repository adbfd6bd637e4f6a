"""
Logging for shiftplan.

Every module logs under the ``shiftplan`` namespace:

    TRACE (5)   boundary function calls, rejected generator candidates
    DEBUG       per-week generator blocks, cache summaries, decoded documents
    INFO        generator phases with their cell counts, saved files
    WARNING     employees left under their hour target
    ERROR       failures at the I/O and CLI boundaries
"""
import functools
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER = "shiftplan"
CONSOLE_FORMAT = "%(levelname)-7s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s:%(lineno)d | %(message)s"
LOG_FILE_BYTES = 2 * 1024 * 1024
LOG_FILE_BACKUPS = 3


def _level(name: Optional[str], default: int = logging.INFO) -> int:
    if not name:
        return default
    if name.upper() == "TRACE":
        return TRACE
    return getattr(logging, name.upper(), default)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_level: Optional[str] = None,
) -> logging.Logger:
    """
    Route the ``shiftplan`` loggers to stderr and, optionally, a rotating file.

    Args:
        level: file handler level (also the console level unless given)
        log_file: path of the log file; parent directories are created
        console_level: stderr handler level

    Calling it again replaces the handlers of the previous call.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(TRACE)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(console_level or level))
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=LOG_FILE_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        rotating.setLevel(_level(level))
        rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(rotating)

    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for `name`, placed under the shiftplan namespace if it is not already."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def _short(value: Any, limit: int = 60) -> str:
    text = repr(value)
    return text if len(text) <= limit else text[:limit - 3] + "..."


def log_function_call(func: Callable) -> Callable:
    """
    Trace calls to a boundary function (snapshot load/save).

    Arguments and the result are logged at TRACE; an exception is logged at
    ERROR and re-raised unchanged.
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if logger.isEnabledFor(TRACE):
            shown = [_short(a) for a in args] + [f"{k}={_short(v)}" for k, v in kwargs.items()]
            logger.log(TRACE, f"call {func.__name__}({', '.join(shown)})")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__name__} failed: {type(e).__name__}: {e}")
            raise
        logger.log(TRACE, f"{func.__name__} -> {_short(result)}")
        return result

    return wrapper


class GeneratorLogger:
    """
    Progress log of one generator run.

    Phases and their cell counts go to INFO, week blocks and cache
    summaries to DEBUG, rejected candidates to TRACE.
    """

    def __init__(self, name: str = "shiftplan.solver.generator"):
        self.logger = get_logger(name)
        self.depth = 0

    def _pad(self) -> str:
        return "  " * self.depth

    def phase(self, name: str) -> None:
        self.logger.info(f"phase {name}")

    def phase_done(self, name: str, written: int = 0, cleared: int = 0) -> None:
        """Cells the phase wrote and cleared."""
        self.logger.info(f"phase {name} done: {written} written, {cleared} cleared")

    def step(self, description: str) -> None:
        self.logger.info(f"{self._pad()}- {description}")

    def enter(self, context: str) -> None:
        self.logger.debug(f"{self._pad()}> {context}")
        self.depth += 1

    def exit(self, context: str = "") -> None:
        self.depth = max(0, self.depth - 1)
        if context:
            self.logger.debug(f"{self._pad()}< {context}")

    def constraint(self, name: str, satisfied: bool, details: str = "") -> None:
        """A constraint check on a candidate shift; TRACE only."""
        if not self.logger.isEnabledFor(TRACE):
            return
        msg = f"{self._pad()}{'ok' if satisfied else 'rejected'} {name}"
        if details:
            msg += f" ({details})"
        self.logger.log(TRACE, msg)

    def caches(
        self,
        hours: Mapping[str, float],
        targets: Mapping[str, float],
        staffing: Mapping[int, Any],
    ) -> None:
        """
        Summarize the generator caches at DEBUG: employees still under their
        target and the morning/evening headcount range across the month.
        """
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        under = sum(1 for emp_id, target in targets.items() if hours.get(emp_id, 0) < target)
        msg = f"{self._pad()}caches: {under}/{len(targets)} under target"
        if staffing:
            mornings = [s.morning for s in staffing.values()]
            evenings = [s.evening for s in staffing.values()]
            msg += (f", morning {min(mornings)}-{max(mornings)}"
                    f", evening {min(evenings)}-{max(evenings)} over {len(staffing)} days")
        self.logger.debug(msg)
