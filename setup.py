from setuptools import setup, find_packages

import os

install_requires = [
    "colorama",
    "pyyaml",
    "stevedore>1.20.0",
    "tomlkit",
    "typeguard>=4",
]

extras_require = {"test": ["pytest"]}

# Get armtarget version from the VERSION file.
version_file = os.path.join(os.path.dirname(__file__), "VERSION")
with open(version_file) as f:
    armtarget_version = f.read().strip()

with open(os.path.join(os.path.dirname(__file__), "README.md")) as f:
    long_description = f.read()

setup(
    name="armtarget",
    version=armtarget_version,
    license="GPLv3",
    description="Translate GCC ARM target flags to and from target descriptors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Build Tools",
    ],
    python_requires=">=3.8",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"armtarget": ["py.typed"]},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "armtarget.action": [
            "translate = armtarget.action:TranslateAction",
            "info = armtarget.action:InfoAction",
            "flags = armtarget.action:FlagsAction",
        ],
        "console_scripts": ["armtarget = armtarget.cli:main"],
    },
)
