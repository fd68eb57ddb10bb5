"""Command line initialization.

Main wraps an ArgumentParser carrying the logging options of
armtarget.log and activates logging once the command line is parsed::

    -v|--verbose        show debug traces
    --loglevel LEVEL    console log level, INFO by default
    --log-file FILE     also write all the logs to FILE
    --json-logs         write logs as JSON objects
    --nocolor           do not color the console logs
"""

from __future__ import annotations

import logging
from argparse import ArgumentParser
from typing import TYPE_CHECKING

import armtarget.log

if TYPE_CHECKING:
    from argparse import Namespace
    from typing import List, Optional


class Main:
    """Argument parsing with logging options.

    :ivar args: the parsed arguments, None until parse_args is called
    """

    def __init__(self, name: str):
        """Initialize Main object.

        :param name: program name shown in the usage
        """
        self.name = name
        self.argument_parser = ArgumentParser(prog=name)
        armtarget.log.add_logging_argument_group(
            self.argument_parser, default_level=logging.INFO
        )
        self.args: Optional[Namespace] = None

    def parse_args(self, args: Optional[List[str]] = None) -> None:
        """Parse the command line and activate logging.

        :param args: the arguments, ``sys.argv[1:]`` if None
        """
        first_parse = self.args is None
        self.args = self.argument_parser.parse_args(args)
        if first_parse:
            armtarget.log.activate_with_args(self.args, logging.INFO)
