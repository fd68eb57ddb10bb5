"""ARM architecture feature flags and core models.

This is the vocabulary of the target-resolution subsystem: the fine-grained
feature flags a resolved architecture carries, which flags imply which
others, and the base features of each core model.

Note that even if this is pure data this is not stored as a yaml, for the
same reason as the catalogue knowledge base.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Dict, FrozenSet, Iterable, Tuple

SOFT_FLOAT = "soft_float"

# feature -> features it implies
IMPLIES: Dict[str, Tuple[str, ...]] = {
    SOFT_FLOAT: (),
    "fpregs": (),
    "fp64": ("fpregs",),
    "d32": (),
    "fp16": (),
    "aes": ("neon",),
    "sha2": ("neon",),
    "vfp2sp": ("fpregs",),
    "vfp2": ("fp64", "vfp2sp"),
    "vfp3d16sp": ("vfp2sp",),
    "vfp3d16": ("vfp2", "vfp3d16sp"),
    "vfp3sp": ("d32", "vfp3d16sp"),
    "vfp3": ("vfp3d16", "vfp3sp"),
    "vfp4d16sp": ("vfp3d16sp", "fp16"),
    "vfp4d16": ("vfp4d16sp", "vfp3d16"),
    "vfp4sp": ("vfp4d16sp", "vfp3sp"),
    "vfp4": ("vfp3", "vfp4d16", "vfp4sp"),
    "fp_armv8d16sp": ("vfp4d16sp",),
    "fp_armv8d16": ("vfp4d16", "fp_armv8d16sp"),
    "fp_armv8sp": ("fp_armv8d16sp", "vfp4sp"),
    "fp_armv8": ("fp_armv8d16", "fp_armv8sp", "vfp4"),
    "neon": ("vfp3",),
    "crypto": ("neon", "aes", "sha2"),
    # Architecture level features
    "mclass": (),
    "thumb2": (),
    "thumb_mode": (),
    "dsp": (),
    "hwdiv": (),
    "db": (),
    "noarm": (),
    "strict_align": (),
    "v6m": ("mclass", "noarm", "strict_align", "thumb_mode", "db"),
    "v7m": ("mclass", "noarm", "thumb2", "thumb_mode", "hwdiv", "db"),
    "v7em": ("v7m", "dsp"),
    "v8m": ("v6m", "hwdiv"),
    "v8m_main": ("v7m",),
    "v8_1m_main": ("v8m_main",),
    "mve": ("v8_1m_main", "dsp"),
    "v7a": ("thumb2", "db", "hwdiv"),
    "v7r": ("thumb2", "db", "hwdiv"),
}

# core model name -> base features
CORE_MODELS: Dict[str, Tuple[str, ...]] = {
    "cortex_m0": ("v6m",),
    "cortex_m0plus": ("v6m",),
    "cortex_m1": ("v6m",),
    "cortex_m3": ("v7m",),
    "cortex_m4": ("v7em",),
    "cortex_m7": ("v7em",),
    "cortex_m23": ("v8m",),
    "cortex_m33": ("v8m_main", "dsp"),
    "cortex_m35p": ("v8m_main", "dsp"),
    # Only in the catalogue when the CortexM52Support plugin is loaded
    "cortex_m52": ("mve",),
    "cortex_m55": ("mve",),
    "cortex_m85": ("mve",),
    "cortex_a7": ("v7a",),
    "cortex_a9": ("v7a",),
    "cortex_r5": ("v7r",),
}


class UnknownFeature(KeyError):
    pass


def expand(flags: Iterable[str]) -> FrozenSet[str]:
    """Return the transitive closure of flags under IMPLIES.

    :param flags: feature flag names
    :raise: UnknownFeature if a flag is not in IMPLIES
    """
    result = set()
    todo = list(flags)
    while todo:
        flag = todo.pop()
        if flag in result:
            continue
        if flag not in IMPLIES:
            raise UnknownFeature(flag)
        result.add(flag)
        todo.extend(IMPLIES[flag])
    return frozenset(result)
