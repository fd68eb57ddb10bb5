"""Logging setup of the armtarget library and command line.

Library modules take their loggers from getLogger. Nothing is printed
until activate is called, which the command line does through
activate_with_args once the options of add_logging_argument_group are
parsed.

The library debug traces go through ``armtarget.log.debug`` and are only
emitted when the command line runs with -v (or --loglevel DEBUG).
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from colorama import Fore, Style

from armtarget.config import ConfigSection

if TYPE_CHECKING:
    from argparse import ArgumentParser, Namespace
    from typing import Dict, List, Optional, Tuple


@dataclass
class LogConfig(ConfigSection):
    title: ClassVar[str] = "log"

    pretty: bool = True
    stream_fmt: str = "%(levelname)-8s %(message)s"
    file_fmt: str = "%(asctime)s: %(name)-24s: %(levelname)-8s %(message)s"


log_config = LogConfig.load()

LOG_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class JSONFormatter(logging.Formatter):
    """Format each record as a JSON object on one line."""

    FIELDS = ("asctime", "levelname", "name", "message")

    def __init__(self, datefmt: Optional[str] = None):
        # asctime is only computed when the format references it
        super().__init__(fmt="%(asctime)s", datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        super().format(record)
        return json.dumps({field: getattr(record, field) for field in self.FIELDS})


class ColorHandler(logging.StreamHandler):
    """Console handler coloring the level name starting each line."""

    COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Style.DIM,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }
    LEVEL_RE = re.compile(r"^(%s)" % "|".join(COLORS))

    def format(self, record: logging.LogRecord) -> str:
        return self.LEVEL_RE.sub(
            lambda m: self.COLORS[m.group(1)] + m.group(1) + Style.RESET_ALL,
            super().format(record),
        )


armtarget_logger = logging.getLogger("armtarget")
armtarget_logger.addHandler(logging.NullHandler())


def getLogger(name: Optional[str] = None) -> logging.Logger:
    """Return the armtarget logger or one of its children.

    :param name: child name, armtarget.<name> is returned
    """
    if name is None:
        return armtarget_logger
    return armtarget_logger.getChild(name)


def console_handler(color: bool) -> logging.StreamHandler:
    if color and log_config.pretty and sys.stderr.isatty():
        return ColorHandler()
    return logging.StreamHandler()


def activate(
    level: int = logging.INFO,
    filename: Optional[str] = None,
    json_format: bool = False,
    color: bool = True,
    armtarget_debug: bool = False,
) -> None:
    """Send log records to stderr and optionally to a file.

    :param level: minimum level of the records printed on stderr
    :param filename: also write all the records, whatever their level, to
        this file
    :param json_format: write JSON objects instead of formatted lines
    :param color: color the level names when stderr is a terminal and the
        [log] pretty setting is on
    :param armtarget_debug: emit the armtarget.log.debug traces
    """
    handlers: List[Tuple[logging.Handler, int, str]] = [
        (console_handler(color), level, log_config.stream_fmt)
    ]
    if filename is not None:
        handlers.append(
            (logging.FileHandler(filename), logging.DEBUG, log_config.file_fmt)
        )

    root = logging.getLogger()
    # Filtering is done by the handlers
    root.setLevel(logging.DEBUG)
    for handler, handler_level, fmt in handlers:
        formatter = JSONFormatter() if json_format else logging.Formatter(fmt)
        formatter.converter = time.gmtime  # type: ignore
        handler.setFormatter(formatter)
        handler.setLevel(handler_level)
        root.addHandler(handler)

    if armtarget_debug:
        debug_logger.setLevel(logging.DEBUG)


def add_logging_argument_group(
    argument_parser: ArgumentParser, default_level: int = logging.WARNING
) -> None:
    """Add the logging options, see activate_with_args.

    :param argument_parser: the parser in which the group is created
    :param default_level: console log level when no option is given
    """
    group = argument_parser.add_argument_group(title="logging arguments")
    group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="lower the console log level by one step, can be repeated",
    )
    group.add_argument(
        "--loglevel",
        choices=list(LOG_LEVELS),
        default=logging.getLevelName(default_level),
        help="set the console log level",
    )
    group.add_argument(
        "--log-file", metavar="FILE", help="also write all the logs to FILE"
    )
    group.add_argument(
        "--json-logs", action="store_true", help="write logs as JSON objects"
    )
    group.add_argument(
        "--nocolor", action="store_true", help="do not color the console logs"
    )


def activate_with_args(args: Namespace, default_level: int = logging.WARNING) -> None:
    """Activate logging from the options of add_logging_argument_group.

    :param args: the parsed command line
    :param default_level: level lowered by each -v
    """
    if args.verbose:
        level = max(default_level - 10 * args.verbose, logging.DEBUG)
    else:
        level = LOG_LEVELS[args.loglevel]

    activate(
        level=level,
        filename=args.log_file,
        json_format=args.json_logs,
        color=not args.nocolor,
        armtarget_debug=level <= logging.DEBUG,
    )


# Silent until activate(armtarget_debug=True)
debug_logger = getLogger("debug")
debug_logger.setLevel(logging.CRITICAL + 1)

debug = debug_logger.debug
