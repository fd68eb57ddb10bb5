"""Target queries and their resolution.

An ArchQuery is what a build system asks for: an architecture selector, an
OS, an ABI, a core model and extra feature flags. Resolving it merges the
core model base features with the requested ones and expands them through
the implication table, giving a ResolvedArch whose feature set can be
queried flag by flag.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from armtarget.error import ArmTargetError
from armtarget.features import CORE_MODELS, UnknownFeature, expand

if TYPE_CHECKING:
    from typing import FrozenSet, Iterable, Tuple


FREESTANDING = "freestanding"


class ResolutionError(ArmTargetError):
    """Invalid query for the target-resolution subsystem."""

    pass


@dataclass(frozen=True)
class ArchQuery:
    """A target query.

    - arch: architecture selector (thumb, thumbeb, arm, armeb, ...)
    - os: OS tag, freestanding for bare metal targets
    - abi: eabi or eabihf
    - cpu_model: core model name
    - features_add: feature flags added to the core model ones
    """

    arch: str
    os: str
    abi: str
    cpu_model: str
    features_add: Tuple[str, ...] = ()

    def triple(self) -> str:
        return f"{self.arch}-{self.os}-{self.abi}"

    def cpu_string(self) -> str:
        return "".join([self.cpu_model] + [f"+{f}" for f in self.features_add])

    @classmethod
    def parse(cls, triple: str, cpu: str) -> ArchQuery:
        """Create a query from its string form.

        :param triple: arch-os-abi, e.g. thumb-freestanding-eabihf
        :param cpu: core model followed by +feature items, e.g.
            cortex_m7+fp_armv8d16sp
        :raise: ResolutionError
        """
        parts = triple.split("-")
        if len(parts) != 3:
            raise ResolutionError(
                f"invalid target {triple!r}, expecting arch-os-abi",
                origin="ArchQuery.parse",
            )
        cpu_model, *features = cpu.split("+")
        return cls(
            arch=parts[0],
            os=parts[1],
            abi=parts[2],
            cpu_model=cpu_model,
            features_add=tuple(features),
        )


@dataclass(frozen=True)
class ResolvedArch:
    """A resolved target, with its complete feature set."""

    arch: str
    os: str
    abi: str
    cpu_model: str
    features: FrozenSet[str] = frozenset()

    def has(self, feature: str) -> bool:
        return feature in self.features

    def has_all(self, features: Iterable[str]) -> bool:
        return all(self.has(f) for f in features)


def resolve_query(query: ArchQuery) -> ResolvedArch:
    """Resolve a query into a ResolvedArch.

    :param query: the query to resolve
    :raise: ResolutionError if the core model or a feature is unknown
    """
    if query.cpu_model not in CORE_MODELS:
        raise ResolutionError(
            f"unknown cpu model {query.cpu_model}", origin="resolve_query"
        )
    try:
        features = expand(CORE_MODELS[query.cpu_model] + tuple(query.features_add))
    except UnknownFeature as err:
        raise ResolutionError(
            f"unknown feature {err.args[0]}", origin="resolve_query"
        ) from err
    return ResolvedArch(
        arch=query.arch,
        os=query.os,
        abi=query.abi,
        cpu_model=query.cpu_model,
        features=features,
    )
