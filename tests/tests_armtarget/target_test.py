import copy

import pytest

import armtarget.target
from armtarget.catalogue import Catalogue, get_catalogue
from armtarget.catalogue.knowledge_base import CPU_INFO, FPU_INFO
from armtarget.error import (
    FeatureOverflow,
    FpuRequiredForFloatAbi,
    FpuSpecifiedForSoftFloatAbi,
    IncompatibleFpuForCpu,
    InvalidCpu,
    InvalidFloatAbi,
    InvalidFpu,
    MissingCpu,
    MissingFpu,
    NoFpuOnCpu,
    NotFreestanding,
    UnsupportedCpu,
)
from armtarget.model import Cpu, Endianness, FloatAbi, Fpu, InstructionSet
from armtarget.resolve import ArchQuery, ResolvedArch, resolve_query
from armtarget.target import (
    MAX_QUERY_FEATURES,
    TargetDescriptor,
    check_compatibility,
    is_within,
)


def all_cpus():
    return list(get_catalogue().cpus.values())


def resolve(arch, cpu_model, *features, os="freestanding", abi="eabihf"):
    return resolve_query(
        ArchQuery(arch=arch, os=os, abi=abi, cpu_model=cpu_model, features_add=features)
    )


def test_from_flags():
    target = TargetDescriptor.from_flags(
        "cortex-m7", "hard", "fpv5-sp-d16", mthumb=True, marm=False
    )
    assert target == TargetDescriptor(
        cpu=Cpu.by_name("cortex-m7"),
        instruction_set=InstructionSet.thumb,
        float_abi=FloatAbi.hard,
        fpu=Fpu.by_name("fpv5-sp-d16"),
    )
    assert target.endianness == Endianness.little
    assert target.fpu.name == "fpv5-sp-d16"


@pytest.mark.parametrize(
    "args,error",
    [
        ((None, "hard", "fpv5-sp-d16"), MissingCpu),
        (("doinkus", "hard", "fpv5-sp-d16"), InvalidCpu),
        (("cortex-m7", "doinkus", "fpv5-sp-d16"), InvalidFloatAbi),
        (("cortex-m7", "hard", None), MissingFpu),
        (("cortex-m7", "softfp", None), MissingFpu),
        (("cortex-m7", "hard", "doinkus"), InvalidFpu),
        (("doinkus", "doinkus", "doinkus"), InvalidCpu),
        (("cortex-m0", "soft", "doinkus"), InvalidFpu),
    ],
)
def test_from_flags_errors(args, error):
    with pytest.raises(error):
        TargetDescriptor.from_flags(*args, mthumb=True, marm=False)


def test_flag_error_messages():
    with pytest.raises(InvalidCpu) as err:
        TargetDescriptor.from_flags("doinkus")
    assert str(err.value) == (
        "--mcpu=doinkus is not a valid CPU, see info command for valid CPUs"
    )
    with pytest.raises(InvalidFloatAbi) as err:
        TargetDescriptor.from_flags("cortex-m4", "hardfp")
    assert str(err.value) == (
        "--mfloat-abi=hardfp is not a valid float abi, valid options are"
        ' "hard", "softfp", and "soft"'
    )
    with pytest.raises(MissingFpu) as err:
        TargetDescriptor.from_flags("cortex-m4", "hard")
    assert str(err.value) == "--mfpu is required if --mfloat-abi!=soft"


@pytest.mark.parametrize(
    "mthumb,marm,expected",
    [
        (False, False, InstructionSet.thumb),
        (True, False, InstructionSet.thumb),
        (False, True, InstructionSet.arm),
        (True, True, InstructionSet.thumb),
    ],
)
def test_instruction_set(mthumb, marm, expected):
    target = TargetDescriptor.from_flags("cortex-m3", mthumb=mthumb, marm=marm)
    assert target.instruction_set == expected


def test_soft_float_default():
    for cpu in all_cpus():
        if cpu.has_fpu:
            continue
        target = TargetDescriptor.from_flags(cpu.name, None, None)
        assert target.fpu is None
        assert target.float_abi == FloatAbi.soft


def test_fpu_under_soft_float():
    for cpu in all_cpus():
        if not cpu.has_fpu:
            continue
        with pytest.raises(FpuSpecifiedForSoftFloatAbi):
            TargetDescriptor.from_flags(cpu.name, "soft", cpu.compatible_fpus[0].name)


def test_fpu_less_hard_float():
    for cpu in all_cpus():
        if cpu.has_fpu:
            continue
        for fpu in get_catalogue().fpus:
            with pytest.raises(NoFpuOnCpu):
                TargetDescriptor.from_flags(cpu.name, "hard", fpu)


@pytest.mark.parametrize("fpu", ["vfpv2", "vfp", "fp-armv8", "neon-vfpv3"])
def test_incompatible_pairing(fpu):
    with pytest.raises(IncompatibleFpuForCpu):
        TargetDescriptor.from_flags("cortex-m7", "hard", fpu)


def test_alias_is_compatible():
    """An alias is accepted wherever its canonical FPU is."""
    m7 = Cpu.by_name("cortex-m7")
    target = TargetDescriptor(
        cpu=m7,
        float_abi=FloatAbi.hard,
        fpu=Fpu(name="fpv5-single", priority=2, features=("fp_armv8d16sp",)),
    )
    target.validate()


def test_validate():
    m0 = Cpu.by_name("cortex-m0")
    m7 = Cpu.by_name("cortex-m7")

    with pytest.raises(FpuSpecifiedForSoftFloatAbi):
        TargetDescriptor(
            cpu=m0, float_abi=FloatAbi.soft, fpu=Fpu.by_name("fp-armv8")
        ).to_query()
    with pytest.raises(NoFpuOnCpu):
        TargetDescriptor(
            cpu=m0, float_abi=FloatAbi.hard, fpu=Fpu.by_name("fp-armv8")
        ).to_query()
    with pytest.raises(IncompatibleFpuForCpu):
        TargetDescriptor(
            cpu=m7, float_abi=FloatAbi.hard, fpu=Fpu.by_name("vfp")
        ).to_query()

    m4 = Cpu.by_name("cortex-m4")
    for float_abi in (FloatAbi.hard, FloatAbi.softfp):
        target = TargetDescriptor(cpu=m4, float_abi=float_abi)
        with pytest.raises(FpuRequiredForFloatAbi) as err:
            target.validate()
        assert str(err.value) == f"-mfloat-abi={float_abi.value} requires an FPU"
        # Never projected, so never read back as a soft target
        with pytest.raises(FpuRequiredForFloatAbi):
            target.to_query()

    assert TargetDescriptor(cpu=m0).validate() is None


def test_to_query():
    target = TargetDescriptor.from_flags("cortex-m7", "hard", "fpv5-sp-d16")
    assert target.to_query() == ArchQuery(
        arch="thumb",
        os="freestanding",
        abi="eabihf",
        cpu_model="cortex_m7",
        features_add=("fp_armv8d16sp",),
    )

    target = TargetDescriptor.from_flags("cortex-m33", "softfp", "neon-fp-armv8")
    query = target.to_query()
    assert query.abi == "eabihf"
    assert query.features_add == ("soft_float", "neon", "fp_armv8")

    query = TargetDescriptor.from_flags("cortex-m0").to_query()
    assert query.abi == "eabi"
    assert query.features_add == ()


@pytest.mark.parametrize(
    "instruction_set,endianness,arch",
    [
        (InstructionSet.thumb, Endianness.little, "thumb"),
        (InstructionSet.thumb, Endianness.big, "thumbeb"),
        (InstructionSet.arm, Endianness.little, "arm"),
        (InstructionSet.arm, Endianness.big, "armeb"),
    ],
)
def test_arch_selector(instruction_set, endianness, arch):
    target = TargetDescriptor(
        cpu=Cpu.by_name("cortex-m3"),
        instruction_set=instruction_set,
        endianness=endianness,
    )
    query = target.to_query()
    assert query.arch == arch

    back = TargetDescriptor.from_resolved_arch(resolve_query(query))
    assert back.instruction_set == instruction_set
    assert back.endianness == endianness


def test_feature_overflow():
    big_fpu = Fpu(
        name="big",
        priority=0,
        features=tuple(f"f{i}" for i in range(MAX_QUERY_FEATURES + 1)),
    )
    cpu = Cpu(
        name="cortex-big",
        architecture="test",
        core_model="cortex_big",
        compatible_fpus=(big_fpu,),
    )
    with pytest.raises(FeatureOverflow):
        TargetDescriptor(cpu=cpu, float_abi=FloatAbi.hard, fpu=big_fpu).to_query()

    fitting_fpu = Fpu(
        name="fits",
        priority=0,
        features=tuple(f"f{i}" for i in range(MAX_QUERY_FEATURES - 1)),
    )
    cpu = Cpu(
        name="cortex-fits",
        architecture="test",
        core_model="cortex_fits",
        compatible_fpus=(fitting_fpu,),
    )
    query = TargetDescriptor(
        cpu=cpu, float_abi=FloatAbi.softfp, fpu=fitting_fpu
    ).to_query()
    assert len(query.features_add) == MAX_QUERY_FEATURES


@pytest.mark.parametrize("float_abi", ["hard", "softfp"])
def test_round_trip(float_abi):
    count = 0
    for cpu in all_cpus():
        for fpu in cpu.compatible_fpus:
            for marm in (False, True):
                target = TargetDescriptor.from_flags(
                    cpu.name, float_abi, fpu.name, marm=marm
                )
                arch = resolve_query(target.to_query())
                back = TargetDescriptor.from_resolved_arch(arch)
                assert back == target
                assert back.fpu.name == fpu.name
                count += 1
    assert count == 2 * (1 + 5 + 4 * 2)


def test_round_trip_soft():
    for cpu in all_cpus():
        target = TargetDescriptor.from_flags(cpu.name)
        back = TargetDescriptor.from_resolved_arch(resolve_query(target.to_query()))
        assert back == target
        assert back.fpu is None


def test_from_resolved_arch():
    target = TargetDescriptor.from_resolved_arch(
        resolve("thumb", "cortex_m7", "fp_armv8d16sp")
    )
    assert target == TargetDescriptor(
        cpu=Cpu.by_name("cortex-m7"),
        float_abi=FloatAbi.hard,
        fpu=Fpu.by_name("fpv5-sp-d16"),
    )

    target = TargetDescriptor.from_resolved_arch(
        resolve("thumb", "cortex_m7", "fp_armv8d16sp", "soft_float")
    )
    assert target.float_abi == FloatAbi.softfp
    assert target.fpu.name == "fpv5-sp-d16"

    target = TargetDescriptor.from_resolved_arch(
        resolve("thumb", "cortex_m55", "fp_armv8")
    )
    assert target.float_abi == FloatAbi.hard
    assert target.fpu.name == "fp-armv8"

    target = TargetDescriptor.from_resolved_arch(
        resolve("thumb", "cortex_m55", "fp_armv8", "neon")
    )
    assert target.fpu.name == "neon-fp-armv8"


def test_priority_tie_break(monkeypatch):
    """The most specific FPU wins even though plainer ones also match."""
    arch = ResolvedArch(
        arch="thumb",
        os="freestanding",
        abi="eabihf",
        cpu_model="cortex_m33",
        features=frozenset(["crypto", "neon", "fp_armv8"]),
    )
    catalogue = get_catalogue()
    candidates = [
        fpu for fpu in catalogue.fpus.values() if arch.has_all(fpu.features)
    ]
    assert {fpu.name for fpu in candidates} == {
        "crypto-neon-fp-armv8",
        "neon-fp-armv8",
        "fp-armv8",
    }

    # crypto-neon-fp-armv8 is selected, and it is not a cortex-m33 FPU
    with pytest.raises(IncompatibleFpuForCpu) as err:
        TargetDescriptor.from_resolved_arch(arch)
    assert "crypto-neon-fp-armv8" in str(err.value)

    # Same features with a cortex-m33 accepting the crypto FPU
    cpu_info = copy.deepcopy(CPU_INFO)
    cpu_info["cortex-m33"]["fpus"].append("crypto-neon-fp-armv8")
    monkeypatch.setattr(
        armtarget.target, "get_catalogue", lambda: Catalogue(FPU_INFO, cpu_info)
    )
    target = TargetDescriptor.from_resolved_arch(arch)
    assert target.fpu.name == "crypto-neon-fp-armv8"
    assert target.float_abi == FloatAbi.hard


def test_reverse_errors():
    with pytest.raises(UnsupportedCpu):
        TargetDescriptor.from_resolved_arch(resolve("arm", "cortex_a7"))
    with pytest.raises(UnsupportedCpu):
        TargetDescriptor.from_resolved_arch(resolve("aarch64", "cortex_m4"))
    with pytest.raises(NotFreestanding):
        TargetDescriptor.from_resolved_arch(resolve("thumb", "cortex_m4", os="linux"))
    with pytest.raises(IncompatibleFpuForCpu):
        TargetDescriptor.from_resolved_arch(
            resolve("thumb", "cortex_m0", "fp_armv8", "neon")
        )


def test_equality():
    a = TargetDescriptor.from_flags("cortex-m7", "hard", "fpv5-sp-d16")
    b = TargetDescriptor.from_flags("cortex-m7", "hard", "fpv5-sp-d16")
    assert a == b
    assert hash(a) == hash(b)
    assert a != b.replace(fpu=Fpu.by_name("fpv5-d16"))
    assert a != b.replace(float_abi=FloatAbi.softfp)
    assert a != b.replace(endianness=Endianness.big)
    assert a != TargetDescriptor.from_flags("cortex-m7")
    assert TargetDescriptor.from_flags("cortex-m0") != TargetDescriptor.from_flags(
        "cortex-m0plus"
    )


def test_equality_is_structural():
    """FPU aliases with the same feature set give equal descriptors."""
    m7 = Cpu.by_name("cortex-m7")
    m0 = Cpu.by_name("cortex-m0")
    a = TargetDescriptor(cpu=m7, float_abi=FloatAbi.hard, fpu=Fpu.by_name("vfpv2"))
    b = TargetDescriptor(cpu=m7, float_abi=FloatAbi.hard, fpu=Fpu.by_name("vfp"))
    assert a == b
    assert hash(a) == hash(b)

    c = TargetDescriptor(cpu=m0, instruction_set=InstructionSet.arm)
    d = TargetDescriptor(cpu=m0, instruction_set=InstructionSet.arm)
    assert c == d
    assert c != d.replace(instruction_set=InstructionSet.thumb)


def test_immutable():
    target = TargetDescriptor.from_flags("cortex-m4")
    with pytest.raises(AttributeError):
        target.float_abi = FloatAbi.hard
    other = target.replace(float_abi=FloatAbi.hard, fpu=Fpu.by_name("fpv4-sp-d16"))
    assert target.float_abi == FloatAbi.soft
    other.validate()


def test_gcc_flags():
    target = TargetDescriptor.from_flags(
        "cortex-m7", "softfp", "fpv5-d16", marm=True, big_endian=True
    )
    assert target.gcc_flags() == [
        "-mcpu=cortex-m7",
        "-marm",
        "-mbig-endian",
        "-mfloat-abi=softfp",
        "-mfpu=fpv5-d16",
    ]
    assert TargetDescriptor.from_flags("cortex-m0").gcc_flags() == [
        "-mcpu=cortex-m0",
        "-mthumb",
        "-mfloat-abi=soft",
    ]


def test_str():
    target = TargetDescriptor.from_flags("cortex-m4", "hard", "fpv4-sp-d16")
    assert str(target).splitlines() == [
        "cpu:             cortex-m4",
        "instruction set: thumb",
        "endianness:      little",
        "float abi:       hard",
        "fpu:             fpv4-sp-d16",
    ]


def test_check_compatibility():
    check_compatibility(resolve("thumb", "cortex_m0", "fp_armv8"))
    with pytest.raises(UnsupportedCpu):
        check_compatibility(resolve("arm", "cortex_r5"))


def test_is_within():
    a = TargetDescriptor.from_flags("cortex-m7", "hard", "fpv5-sp-d16")
    b = TargetDescriptor.from_flags("cortex-m0")
    assert is_within(resolve_query(a.to_query()), [a, b])
    assert is_within(resolve_query(b.to_query()), [a, b])
    assert not is_within(resolve("thumb", "cortex_m4", abi="eabi"), [a, b])
    assert not is_within(resolve("arm", "cortex_a9"), [a, b])
    assert not is_within(resolve_query(a.to_query()), [])
