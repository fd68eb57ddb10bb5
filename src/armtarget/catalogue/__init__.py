from __future__ import annotations

import abc
import copy
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import TYPE_CHECKING, ClassVar

import armtarget.log
import stevedore
from armtarget.config import ConfigSection
from armtarget.error import InvalidCpu, InvalidFpu
from armtarget.model import Cpu, Fpu

if TYPE_CHECKING:
    from typing import Any, Dict, Mapping, Optional

    CatalogueEntry = Dict[str, Dict[str, Any]]


@dataclass
class CatalogueConfig(ConfigSection):
    title: ClassVar[str] = "catalogue"

    load_plugins: bool = True


class CataloguePlugin(metaclass=abc.ABCMeta):
    """Plugin API to extend the CPU and FPU knowledge base.

    To create a plugin, override this class and the method ``update_db``. In
    ``update_db`` modify the values of self.fpu_info and self.cpu_info.

    Then add an entry point in your package in the group armtarget.catalogue
    and reference your new class. e.g.::

        entry_points={
            'armtarget.catalogue': [
                'my_db = mypackage.catalogue:MyCataloguePlugin']}
    """

    def __init__(self, fpu_info: CatalogueEntry, cpu_info: CatalogueEntry):
        self.fpu_info = fpu_info
        self.cpu_info = cpu_info

    @abc.abstractmethod
    def update_db(self) -> None:
        pass  # all: no cover


class CortexM52Support(CataloguePlugin):
    """Plugin example adding support for the Cortex-M52."""

    def update_db(self) -> None:
        """Add the Cortex-M52 CPU."""
        self.cpu_info["cortex-m52"] = {
            "arch": "Armv8.1-M Mainline",
            "model": "cortex_m52",
            "fpus": ["fp-armv8", "neon-fp-armv8"],
        }


class Catalogue:
    """Read-only tables of the supported CPUs and FPUs.

    Both tables preserve the declaration order of the knowledge base.
    """

    def __init__(self, fpu_info: CatalogueEntry, cpu_info: CatalogueEntry):
        fpus: Dict[str, Fpu] = {}
        for name, info in fpu_info.items():
            if "alias" in info:
                features = tuple(fpu_info[info["alias"]]["features"])
            else:
                features = tuple(info["features"])
            fpus[name] = Fpu(name=name, priority=info["priority"], features=features)

        cpus: Dict[str, Cpu] = {}
        for name, info in cpu_info.items():
            cpus[name] = Cpu(
                name=name,
                architecture=info["arch"],
                core_model=info["model"],
                compatible_fpus=tuple(fpus[fpu_name] for fpu_name in info["fpus"]),
            )

        self.fpus: Mapping[str, Fpu] = MappingProxyType(fpus)
        self.cpus: Mapping[str, Cpu] = MappingProxyType(cpus)

    def fpu(self, name: str) -> Fpu:
        try:
            return self.fpus[name]
        except KeyError:
            raise InvalidFpu(name) from None

    def cpu(self, name: str) -> Cpu:
        try:
            return self.cpus[name]
        except KeyError:
            raise InvalidCpu(name) from None

    def cpu_for_model(self, core_model: str) -> Optional[Cpu]:
        """Return the CPU whose core model is core_model, None if unknown."""
        for cpu in self.cpus.values():
            if cpu.core_model == core_model:
                return cpu
        return None


@lru_cache()
def get_catalogue() -> Catalogue:
    """Load the catalogue, including all content from plugins.

    :return: the catalogue of supported CPUs and FPUs
    """
    from armtarget.catalogue.knowledge_base import CPU_INFO, FPU_INFO

    armtarget.log.debug("loading catalogue")
    fpu_info = copy.deepcopy(FPU_INFO)
    cpu_info = copy.deepcopy(CPU_INFO)

    if CatalogueConfig.load().load_plugins:
        ext = stevedore.ExtensionManager(
            namespace="armtarget.catalogue",
            invoke_on_load=True,
            invoke_args=(fpu_info, cpu_info),
        )

        plugin_names = ext.names()

        if plugin_names:
            armtarget.log.debug(
                "loading catalogue plugins %s", ",".join(plugin_names)
            )
            ext.map_method("update_db")
    return Catalogue(fpu_info, cpu_info)
