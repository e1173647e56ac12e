#!/usr/bin/env python

# Get version without importing nidefaults because
# dependencies may not be installed yet
import os

from setuptools import find_namespace_packages, setup

g, ver = {}, {}
with open(os.path.join("nidefaults", "version.py")) as f:
    exec(f.read(), g, ver)

setup(
    name="nidefaults",
    version=ver["__version__"],
    description=(
        "Verify network devices forward IPv4 and IPv6 by default"
        " in the default network instance"
    ),
    author="Various",
    python_requires=">=3.11",
    packages=find_namespace_packages(include=["nidefaults", "nidefaults.*"]),
    package_data={"": ["*.json"]},
    include_package_data=True,
    install_requires=[
        "httpx",
        "jsonmerge",
        "netaddr",
        "pluggy",
        "requests",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
        "dev": [
            "nox",
            "ruff",
            "mypy",
            "types-requests",
        ],
    },
    entry_points={
        "console_scripts": ["nidefaults=nidefaults.main:main"],
        "nidefaults": ["core = nidefaults.plugins.core"],
    },
)
