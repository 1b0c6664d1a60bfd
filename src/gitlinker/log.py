"""Log utilities for applications embedding gitlinker.

gitlinker itself only ever logs through ``logging.getLogger(__name__)``;
the formatters and :func:`setup_logger` here are for the programs that call
into it (setup wizards, CI jobs) and want colorized output.
"""

from __future__ import annotations

import contextlib
import logging
import sys
import time
import typing as t

from colorama import Fore, Style

LEVEL_COLORS = {
    "DEBUG": Fore.BLUE,  # Blue
    "INFO": Fore.GREEN,  # Green
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.RED,
}


def setup_logger(
    log: logging.Logger | None = None,
    level: t.Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
) -> None:
    """Configure the gitlinker logging hierarchy once and reuse it everywhere."""
    resolved_level = getattr(logging, level.upper(), logging.INFO)

    gitlinker_logger = logging.getLogger("gitlinker")

    # The package installs a NullHandler at import time; replace it with a
    # real stream handler when an application asks for output.
    existing_handlers = [
        handler
        for handler in gitlinker_logger.handlers
        if not isinstance(handler, logging.NullHandler)
    ]
    formatter: logging.Formatter = (
        DebugLogFormatter() if resolved_level <= logging.DEBUG else SimpleLogFormatter()
    )
    if not existing_handlers:
        for handler in list(gitlinker_logger.handlers):
            gitlinker_logger.removeHandler(handler)
        stream_handler = logging.StreamHandler()
        stream_handler.stream = sys.stdout
        stream_handler.setFormatter(formatter)
        gitlinker_logger.addHandler(stream_handler)
    else:
        for handler in existing_handlers:
            if isinstance(handler, logging.StreamHandler):
                with contextlib.suppress(ValueError):
                    handler.flush()
                handler.stream = sys.stdout
            handler.setFormatter(formatter)

    gitlinker_logger.setLevel(resolved_level)
    gitlinker_logger.propagate = True

    if log is not None:
        log.setLevel(resolved_level)
        log.propagate = True


class LogFormatter(logging.Formatter):
    """Log formatting for gitlinker."""

    level_template = "(%(levelname)s)"

    def _prefix_parts(self, record: logging.LogRecord) -> list[str]:
        return [
            Style.RESET_ALL,
            LEVEL_COLORS.get(record.levelname, ""),
            Style.BRIGHT,
            self.level_template,
            Style.RESET_ALL,
            " [",
            Fore.BLACK,
            Style.DIM,
            Style.BRIGHT,
            "%(asctime)s",
            Fore.RESET,
            Style.RESET_ALL,
            "] ",
            Fore.WHITE,
            Style.DIM,
            Style.BRIGHT,
            "%(name)s",
            Fore.RESET,
            Style.RESET_ALL,
            " ",
        ]

    def template(self, record: logging.LogRecord) -> str:
        """Return the prefix for the log message. Template for Formatter.

        Parameters
        ----------
        record : :py:class:`logging.LogRecord`
            Passed in from inside the :py:meth:`logging.Formatter.format` record.
        """
        return "".join([*self._prefix_parts(record), Style.RESET_ALL])

    def __init__(self, color: bool = True, **kwargs: t.Any) -> None:
        logging.Formatter.__init__(self, **kwargs)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record."""
        try:
            record.message = record.getMessage()
        except Exception as e:
            record.message = f"Bad message ({e!r}): {record.__dict__!r}"

        formatting = self.converter(record.created)
        record.asctime = time.strftime("%H:%M:%S", formatting)
        prefix = self.template(record) % record.__dict__

        formatted = prefix + " " + record.message
        return formatted.replace("\n", "\n    ")


class DebugLogFormatter(LogFormatter):
    """Provides greater technical details than standard log Formatter."""

    level_template = "(%(levelname)1.1s)"

    def template(self, record: logging.LogRecord) -> str:
        """Return the prefix for the log message, with module and line number."""
        return "".join(
            [
                *self._prefix_parts(record),
                Fore.GREEN,
                Style.BRIGHT,
                "%(module)s.%(funcName)s()",
                Fore.BLACK,
                Style.DIM,
                Style.BRIGHT,
                ":",
                Style.RESET_ALL,
                Fore.CYAN,
                "%(lineno)d",
                Style.RESET_ALL,
            ],
        )


class SimpleLogFormatter(logging.Formatter):
    """Simple formatter that outputs only the message, like print()."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record to just return the message."""
        return record.getMessage()
