"""GCC ARM target descriptors.

A TargetDescriptor represents the target selected by the arm-none-eabi-gcc
flags -mcpu, -mfpu, -mfloat-abi, -mthumb/-marm and -mbig-endian. It can be
created from those flags, projected onto an ArchQuery for the
target-resolution subsystem, and recovered from a ResolvedArch.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING

from armtarget.catalogue import get_catalogue
from armtarget.error import (
    ConversionError,
    FeatureOverflow,
    FpuRequiredForFloatAbi,
    FpuSpecifiedForSoftFloatAbi,
    IncompatibleFpuForCpu,
    InvalidFloatAbi,
    MissingCpu,
    MissingFpu,
    NoFpuOnCpu,
    NotFreestanding,
    UnsupportedCpu,
)
from armtarget.features import SOFT_FLOAT
from armtarget.model import Arch, Cpu, Endianness, FloatAbi, Fpu, InstructionSet
from armtarget.resolve import FREESTANDING, ArchQuery

if TYPE_CHECKING:
    from typing import Any, Dict, Iterable, List, Optional
    from armtarget.resolve import ResolvedArch

# Maximum number of feature flags a query can add
MAX_QUERY_FEATURES = 16


@dataclass(frozen=True, eq=False)
class TargetDescriptor:
    """Target selected by a set of GCC flags.

    Attributes are:

    - cpu: the -mcpu value
    - instruction_set: thumb (-mthumb, default) or arm (-marm)
    - endianness: little (default) or big (-mbig-endian)
    - float_abi: the -mfloat-abi value, soft by default
    - fpu: the -mfpu value, None when float_abi is soft
    """

    cpu: Cpu
    instruction_set: InstructionSet = InstructionSet.thumb
    endianness: Endianness = Endianness.little
    float_abi: FloatAbi = FloatAbi.soft
    fpu: Optional[Fpu] = None

    @classmethod
    def from_flags(
        cls,
        mcpu: Optional[str],
        mfloat_abi: Optional[str] = None,
        mfpu: Optional[str] = None,
        mthumb: bool = False,
        marm: bool = False,
        big_endian: bool = False,
    ) -> TargetDescriptor:
        """Create a descriptor from GCC flag values.

        :param mcpu: value of -mcpu
        :param mfloat_abi: value of -mfloat-abi, soft if None
        :param mfpu: value of -mfpu, required unless the float ABI is soft
        :param mthumb: True if -mthumb is passed
        :param marm: True if -marm is passed. The arm instruction set is
            selected only when -marm is passed without -mthumb
        :param big_endian: True if -mbig-endian is passed
        :raise: FlagTranslationError for invalid or missing values,
            ConversionError if the combination is invalid
        """
        if mcpu is None:
            raise MissingCpu()
        cpu = Cpu.by_name(mcpu)

        if mfloat_abi is None:
            float_abi = FloatAbi.soft
        else:
            try:
                float_abi = FloatAbi(mfloat_abi)
            except ValueError:
                raise InvalidFloatAbi(mfloat_abi) from None

        if mfpu is None:
            if float_abi != FloatAbi.soft:
                raise MissingFpu()
            fpu = None
        else:
            fpu = Fpu.by_name(mfpu)

        result = cls(
            cpu=cpu,
            instruction_set=(
                InstructionSet.arm if marm and not mthumb else InstructionSet.thumb
            ),
            endianness=Endianness.big if big_endian else Endianness.little,
            float_abi=float_abi,
            fpu=fpu,
        )
        result.validate()
        return result

    @classmethod
    def from_resolved_arch(cls, arch: ResolvedArch) -> TargetDescriptor:
        """Find the descriptor corresponding to a resolved architecture.

        :param arch: the resolved architecture
        :raise: ConversionError if no descriptor matches
        """
        catalogue = get_catalogue()
        cpu = catalogue.cpu_for_model(arch.cpu_model)
        if cpu is None:
            raise UnsupportedCpu(
                f"no CPU for core model {arch.cpu_model}", origin="from_resolved_arch"
            )
        try:
            selector = Arch(arch.arch)
        except ValueError:
            raise UnsupportedCpu(
                f"unsupported architecture {arch.arch}", origin="from_resolved_arch"
            ) from None
        if arch.os != FREESTANDING:
            raise NotFreestanding(
                f"{arch.os} is not a freestanding target", origin="from_resolved_arch"
            )

        # Several FPUs can match since some feature sets include others: keep
        # the most specific one, i.e. the lowest priority. Ties keep the
        # first FPU in catalogue order.
        fpu: Optional[Fpu] = None
        for candidate in catalogue.fpus.values():
            if arch.has_all(candidate.features):
                if fpu is None or candidate.priority < fpu.priority:
                    fpu = candidate

        if fpu is None:
            float_abi = FloatAbi.soft
        else:
            if not cpu.supports(fpu):
                raise IncompatibleFpuForCpu(
                    f"{fpu.name} is not a valid FPU for {cpu.name}",
                    origin="from_resolved_arch",
                )
            float_abi = FloatAbi.softfp if arch.has(SOFT_FLOAT) else FloatAbi.hard

        return cls(
            cpu=cpu,
            instruction_set=selector.instruction_set,
            endianness=selector.endianness,
            float_abi=float_abi,
            fpu=fpu,
        )

    def validate(self) -> None:
        """Check the FPU settings.

        :raise: ConversionError
        """
        if self.fpu is None:
            if self.float_abi != FloatAbi.soft:
                raise FpuRequiredForFloatAbi(
                    f"-mfloat-abi={self.float_abi.value} requires an FPU"
                )
            return
        if self.float_abi == FloatAbi.soft:
            raise FpuSpecifiedForSoftFloatAbi(
                f"-mfpu={self.fpu.name} cannot be used with -mfloat-abi=soft"
            )
        if not self.cpu.has_fpu:
            raise NoFpuOnCpu(f"{self.cpu.name} has no FPU")
        if not self.cpu.supports(self.fpu):
            raise IncompatibleFpuForCpu(
                f"{self.fpu.name} is not a valid FPU for {self.cpu.name}"
            )

    def to_query(self) -> ArchQuery:
        """Return the query selecting this target.

        :raise: ConversionError
        """
        self.validate()

        features: List[str] = []
        if self.float_abi == FloatAbi.softfp:
            features.append(SOFT_FLOAT)
        if self.fpu is not None:
            features.extend(self.fpu.features)
        if len(features) > MAX_QUERY_FEATURES:
            raise FeatureOverflow(
                f"{len(features)} features requested,"
                f" at most {MAX_QUERY_FEATURES} supported"
            )

        return ArchQuery(
            arch=Arch.select(self.instruction_set, self.endianness).value,
            os=FREESTANDING,
            abi="eabi" if self.float_abi == FloatAbi.soft else "eabihf",
            cpu_model=self.cpu.core_model,
            features_add=tuple(features),
        )

    def replace(self, **changes: Any) -> TargetDescriptor:
        return dataclasses.replace(self, **changes)

    def gcc_flags(self) -> List[str]:
        """Return the GCC flags selecting this target."""
        result = [f"-mcpu={self.cpu.name}", f"-m{self.instruction_set.value}"]
        if self.endianness == Endianness.big:
            result.append("-mbig-endian")
        result.append(f"-mfloat-abi={self.float_abi.value}")
        if self.fpu is not None:
            result.append(f"-mfpu={self.fpu.name}")
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cpu": self.cpu.name,
            "instruction_set": self.instruction_set.value,
            "endianness": self.endianness.value,
            "float_abi": self.float_abi.value,
            "fpu": None if self.fpu is None else self.fpu.name,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetDescriptor):
            return NotImplemented
        if self.fpu is None or other.fpu is None:
            if self.fpu is not other.fpu:
                return False
        elif not self.fpu.same_features(other.fpu):
            return False
        return (
            self.cpu == other.cpu
            and self.instruction_set == other.instruction_set
            and self.endianness == other.endianness
            and self.float_abi == other.float_abi
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.cpu.name,
                self.instruction_set,
                self.endianness,
                self.float_abi,
                None if self.fpu is None else frozenset(self.fpu.features),
            )
        )

    def __str__(self) -> str:
        """Return a representation string of the object."""
        return (
            "cpu:             %(cpu)s\n"
            "instruction set: %(instruction_set)s\n"
            "endianness:      %(endianness)s\n"
            "float abi:       %(float_abi)s\n"
            "fpu:             %(fpu)s" % self.to_dict()
        )


def check_compatibility(arch: ResolvedArch) -> None:
    """Check that the resolved architecture CPU is in the catalogue.

    The FPU is not checked.

    :raise: UnsupportedCpu
    """
    if get_catalogue().cpu_for_model(arch.cpu_model) is None:
        raise UnsupportedCpu(
            f"no CPU for core model {arch.cpu_model}", origin="check_compatibility"
        )


def is_within(arch: ResolvedArch, descriptors: Iterable[TargetDescriptor]) -> bool:
    """Return True if the resolved architecture is one of descriptors."""
    try:
        match = TargetDescriptor.from_resolved_arch(arch)
    except ConversionError:
        return False
    return any(match == descriptor for descriptor in descriptors)
