from __future__ import annotations

import abc
from typing import TYPE_CHECKING

import yaml

import armtarget.log
from armtarget.catalogue import get_catalogue
from armtarget.error import MissingCpu
from armtarget.resolve import ArchQuery, resolve_query
from armtarget.target import TargetDescriptor

if TYPE_CHECKING:
    from argparse import Namespace, _SubParsersAction


class ArmTargetAction(metaclass=abc.ABCMeta):
    """Base class of the armtarget command line actions.

    Actions are registered as entry points in the armtarget.action group.
    """

    def __init__(self, subparsers: _SubParsersAction):
        self.parser = subparsers.add_parser(self.name, help=self.help)
        self.parser.set_defaults(action=self.name)
        self.add_parsers()

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Return the action name."""
        pass  # all: no cover

    @property
    @abc.abstractmethod
    def help(self) -> str:
        """Return the help string associated with this action."""
        pass  # all: no cover

    @abc.abstractmethod
    def add_parsers(self) -> None:
        """Add new command line argument parsers."""
        pass  # all: no cover

    @abc.abstractmethod
    def run(self, args: Namespace) -> None:
        """Run the action.

        :param args: command line arguments gotten with argparse.
        :raise: ArmTargetError
        """
        pass  # all: no cover


class TranslateAction(ArmTargetAction):

    name = "translate"
    help = "Validate and translate GCC arm target arguments to target options"

    def add_parsers(self) -> None:
        self.parser.add_argument("--mcpu", help="GCC cpu target flag (required)")
        self.parser.add_argument(
            "--mfloat-abi",
            help='"hard", "softfp", or "soft" (default "soft")',
        )
        self.parser.add_argument(
            "--mfpu",
            help='GCC floating point unit flag (required with "hard" or "softfp")',
        )
        self.parser.add_argument(
            "--mthumb",
            action="store_true",
            help="use thumb instruction set (default)",
        )
        self.parser.add_argument(
            "--marm", action="store_true", help="use arm instruction set"
        )
        self.parser.add_argument(
            "--mbig-endian", action="store_true", help="generate big endian code"
        )

    def run(self, args: Namespace) -> None:
        try:
            target = TargetDescriptor.from_flags(
                args.mcpu,
                args.mfloat_abi,
                args.mfpu,
                mthumb=args.mthumb,
                marm=args.marm,
                big_endian=args.mbig_endian,
            )
        except MissingCpu:
            self.parser.print_usage()
            raise
        armtarget.log.debug("translated target:\n%s", target)
        query = target.to_query()
        print(
            f"Translated options: -Dtarget={query.triple()} -Dcpu={query.cpu_string()}"
        )


class InfoAction(ArmTargetAction):

    name = "info"
    help = "Show possible compile options for valid targets"

    def add_parsers(self) -> None:
        self.parser.add_argument(
            "--mcpu", help="show only the options for this cpu target"
        )
        self.parser.add_argument(
            "--yaml",
            action="store_true",
            help="dump the catalogue of CPUs and FPUs in YAML format",
        )

    def run(self, args: Namespace) -> None:
        catalogue = get_catalogue()
        if args.mcpu is not None:
            cpus = [catalogue.cpu(args.mcpu)]
        else:
            cpus = list(catalogue.cpus.values())

        if args.yaml:
            fpus = {
                fpu.name: {"priority": fpu.priority, "features": list(fpu.features)}
                for fpu in catalogue.fpus.values()
                if args.mcpu is None or fpu in cpus[0].compatible_fpus
            }
            print(
                yaml.safe_dump(
                    {"cpus": [cpu.as_dict() for cpu in cpus], "fpus": fpus},
                    sort_keys=False,
                ),
                end="",
            )
        else:
            for cpu in cpus:
                print(cpu.info())


class FlagsAction(ArmTargetAction):

    name = "flags"
    help = "Find the GCC arm target arguments corresponding to a target"

    def add_parsers(self) -> None:
        self.parser.add_argument(
            "--target",
            required=True,
            help="target triple, e.g. thumb-freestanding-eabihf",
        )
        self.parser.add_argument(
            "--cpu",
            required=True,
            help="cpu model and features, e.g. cortex_m7+fp_armv8d16sp",
        )

    def run(self, args: Namespace) -> None:
        arch = resolve_query(ArchQuery.parse(args.target, args.cpu))
        armtarget.log.debug("resolved features: %s", ",".join(sorted(arch.features)))
        target = TargetDescriptor.from_resolved_arch(arch)
        print(" ".join(target.gcc_flags()))
