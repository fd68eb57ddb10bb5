from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Dict, Tuple


class FloatAbi(str, Enum):
    """Valid values of the -mfloat-abi flag."""

    hard = "hard"
    soft = "soft"
    softfp = "softfp"


class InstructionSet(str, Enum):
    """Instruction set selected with -mthumb or -marm."""

    thumb = "thumb"
    arm = "arm"


class Endianness(str, Enum):
    """Endianness selected with -mlittle-endian or -mbig-endian."""

    little = "little"
    big = "big"


class Arch(str, Enum):
    """Architecture selectors understood by the target-resolution subsystem."""

    thumb = "thumb"
    thumbeb = "thumbeb"
    arm = "arm"
    armeb = "armeb"

    @classmethod
    def select(cls, instruction_set: InstructionSet, endianness: Endianness) -> Arch:
        if instruction_set == InstructionSet.thumb:
            return cls.thumb if endianness == Endianness.little else cls.thumbeb
        else:
            return cls.arm if endianness == Endianness.little else cls.armeb

    @property
    def instruction_set(self) -> InstructionSet:
        if self in (Arch.thumb, Arch.thumbeb):
            return InstructionSet.thumb
        return InstructionSet.arm

    @property
    def endianness(self) -> Endianness:
        if self in (Arch.thumb, Arch.arm):
            return Endianness.little
        return Endianness.big


@dataclass(frozen=True)
class Fpu:
    """An FPU, i.e. a valid value of the -mfpu flag.

    - name: the -mfpu value
    - priority: when several FPUs match a feature set, the one with the
      lowest priority is the most specific
    - features: feature flags implied by the FPU
    """

    name: str
    priority: int
    features: Tuple[str, ...]

    @classmethod
    def by_name(cls, name: str) -> Fpu:
        """Return the catalogue FPU called name.

        :raise: InvalidFpu
        """
        from armtarget.catalogue import get_catalogue

        return get_catalogue().fpu(name)

    def same_features(self, other: Fpu) -> bool:
        """Return True if both FPUs imply the same feature set.

        Aliases (e.g. vfp and vfpv2) are identical for that purpose.
        """
        return frozenset(self.features) == frozenset(other.features)


@dataclass(frozen=True)
class Cpu:
    """A CPU, i.e. a valid value of the -mcpu flag.

    - name: the -mcpu value
    - architecture: architecture generation (e.g. Armv7E-M)
    - core_model: the core model name in the target-resolution subsystem
    - compatible_fpus: FPUs the CPU can be paired with, empty when the CPU
      has no FPU
    """

    name: str
    architecture: str
    core_model: str
    compatible_fpus: Tuple[Fpu, ...] = ()

    @classmethod
    def by_name(cls, name: str) -> Cpu:
        """Return the catalogue CPU called name.

        :raise: InvalidCpu
        """
        from armtarget.catalogue import get_catalogue

        return get_catalogue().cpu(name)

    @property
    def has_fpu(self) -> bool:
        return len(self.compatible_fpus) > 0

    @property
    def float_abis(self) -> Tuple[FloatAbi, ...]:
        if self.has_fpu:
            return (FloatAbi.soft, FloatAbi.softfp, FloatAbi.hard)
        return (FloatAbi.soft,)

    def supports(self, fpu: Fpu) -> bool:
        return any(compat.same_features(fpu) for compat in self.compatible_fpus)

    def info(self) -> str:
        """Return a one line summary of the valid options for the CPU."""
        abis = ",".join(abi.value for abi in self.float_abis)
        if self.has_fpu:
            fpus = ",".join(fpu.name for fpu in self.compatible_fpus)
        else:
            fpus = "(none)"
        return f"CPU: {self.name:<15} | Float ABIs: {abis:<16} | FPU types: {fpus}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "architecture": self.architecture,
            "core_model": self.core_model,
            "fpus": [fpu.name for fpu in self.compatible_fpus],
        }
