"""Read the armtarget configuration file.

The configuration is a TOML file: ``$ARMTARGET_CONFIG`` when set, otherwise
``armtarget.toml`` in ``$XDG_CONFIG_HOME`` (``~/.config`` by default) and in
the home directory. Each table is read through a ConfigSection subclass::

    [log]
    pretty = false

    [catalogue]
    load_plugins = false
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, ClassVar, get_type_hints

from tomlkit import parse
from tomlkit.exceptions import TOMLKitError
from typeguard import TypeCheckError, check_type

if TYPE_CHECKING:
    from typing import Any, Dict, List, Type, TypeVar

    T = TypeVar("T", bound="ConfigSection")

# armtarget.log depends on this module, use the logging module directly
logger = logging.getLogger("armtarget.config")


def config_files() -> List[str]:
    """Return the configuration files, in loading order."""
    if "ARMTARGET_CONFIG" in os.environ:
        return [os.environ["ARMTARGET_CONFIG"]]
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return [
        os.path.join(config_home, "armtarget.toml"),
        os.path.expanduser("~/armtarget.toml"),
    ]


class Config:
    """Merged content of the configuration files, loaded on first use."""

    data: ClassVar[Dict[str, Any]] = {}

    @classmethod
    def load_file(cls, filename: str) -> None:
        """Merge the tables of a TOML file.

        A file that cannot be parsed is reported and ignored.
        """
        with open(filename) as f:
            content = f.read()
        try:
            cls.data.update(parse(content).unwrap())
        except TOMLKitError as err:
            logger.error("%s: %s", filename, err)

    @classmethod
    def load(cls) -> None:
        for filename in config_files():
            if os.path.isfile(filename):
                cls.load_file(filename)

    @classmethod
    def load_section(cls, section: str) -> Dict[str, Any]:
        """Return a table of the configuration, empty if absent.

        :param section: dotted table name, "log.fmt" is the [log.fmt] table
        """
        if not cls.data:
            cls.load()

        table = cls.data
        for name in section.split("."):
            table = table.get(name, {})
        return table


@dataclass
class ConfigSection:
    """Typed view on a configuration table.

    Subclasses set ``title`` to the table name and declare one field per
    key, with its default::

        @dataclass
        class CatalogueConfig(ConfigSection):
            title: ClassVar[str] = "catalogue"

            load_plugins: bool = True
    """

    title: ClassVar[str]

    @classmethod
    def load(cls: Type[T]) -> T:
        """Read the section, keeping the default of ill-typed values."""
        hints = get_type_hints(cls)
        table = Config.load_section(cls.title)
        values = {}

        for field in fields(cls):
            if field.name not in table:
                continue
            try:
                check_type(table[field.name], hints[field.name])
            except TypeCheckError as err:
                logger.error("%s.%s: %s", cls.title, field.name, err)
            else:
                values[field.name] = table[field.name]

        return cls(**values)
