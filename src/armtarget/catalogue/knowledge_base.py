"""Knowledge base for supported -mcpu and -mfpu values.

Note that even if this is pure data this is not stored as a yaml. This
knowledge base is read by every translation and the cost of parsing the
data would be significant compared to the translation itself.

FPUs are listed by priority band, from the most specific feature sets to
the most general ones:

- crypto + neon + fp-armv8 variants
- neon + fp-armv8 variants
- fp-armv8 variants/vfpv5 variants
- neon + vfpv4 variants
- vfpv4 variants
- neon + vfpv3 variants
- vfpv3 variants
- vfpv2
- vfp

Within a band the superset comes first.
"""

FPU_INFO = {
    "crypto-neon-fp-armv8": {"priority": 0, "features": ["crypto", "neon", "fp_armv8"]},
    "neon-fp-armv8": {"priority": 1, "features": ["neon", "fp_armv8"]},
    "neon-fp16": {"priority": 1, "features": ["neon", "fp_armv8d16"]},
    "fp-armv8": {"priority": 2, "features": ["fp_armv8"]},
    "fpv5-d16": {"priority": 2, "features": ["fp_armv8d16"]},
    "fpv5-sp-d16": {"priority": 2, "features": ["fp_armv8d16sp"]},
    "neon-vfpv4": {"priority": 3, "features": ["neon", "vfp4"]},
    "vfpv4": {"priority": 4, "features": ["vfp4"]},
    "vfpv4-d16": {"priority": 4, "features": ["vfp4d16"]},
    "fpv4-sp-d16": {"priority": 4, "features": ["vfp4d16sp"]},
    "neon-vfpv3": {"priority": 5, "features": ["neon", "vfp3"]},
    "neon": {"priority": 5, "alias": "neon-vfpv3"},
    "vfp3": {"priority": 6, "features": ["vfp3"]},
    "vfpv3": {"priority": 6, "alias": "vfp3"},
    "vfpv3-d16": {"priority": 6, "features": ["vfp3d16"]},
    "vfpv3-d16-fp16": {"priority": 6, "features": ["vfp3d16sp"]},
    "vfpv3-fp16": {"priority": 6, "features": ["vfp3sp"]},
    "vfpv2": {"priority": 7, "features": ["vfp2"]},
    "vfp": {"priority": 8, "alias": "vfpv2"},
}

CPU_INFO = {
    # Armv6-M
    "cortex-m0": {"arch": "Armv6-M", "model": "cortex_m0", "fpus": []},
    "cortex-m0plus": {"arch": "Armv6-M", "model": "cortex_m0plus", "fpus": []},
    "cortex-m1": {"arch": "Armv6-M", "model": "cortex_m1", "fpus": []},
    # Armv7-M
    "cortex-m3": {"arch": "Armv7-M", "model": "cortex_m3", "fpus": []},
    # Armv7E-M
    "cortex-m4": {"arch": "Armv7E-M", "model": "cortex_m4", "fpus": ["fpv4-sp-d16"]},
    "cortex-m7": {
        "arch": "Armv7E-M",
        "model": "cortex_m7",
        "fpus": ["vfpv4", "vfpv4-d16", "fpv4-sp-d16", "fpv5-d16", "fpv5-sp-d16"],
    },
    # Armv8-M Baseline
    "cortex-m23": {"arch": "Armv8-M Baseline", "model": "cortex_m23", "fpus": []},
    # Armv8-M Mainline
    "cortex-m33": {
        "arch": "Armv8-M Mainline",
        "model": "cortex_m33",
        "fpus": ["fp-armv8", "neon-fp-armv8"],
    },
    "cortex-m35p": {
        "arch": "Armv8-M Mainline",
        "model": "cortex_m35p",
        "fpus": ["fp-armv8", "neon-fp-armv8"],
    },
    # Armv8.1-M Mainline
    "cortex-m55": {
        "arch": "Armv8.1-M Mainline",
        "model": "cortex_m55",
        "fpus": ["fp-armv8", "neon-fp-armv8"],
    },
    "cortex-m85": {
        "arch": "Armv8.1-M Mainline",
        "model": "cortex_m85",
        "fpus": ["fp-armv8", "neon-fp-armv8"],
    },
}
