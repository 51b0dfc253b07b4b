#!/usr/bin/env python3
"""Setup script for ark-serman."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the long description from README
README = Path("README.md")
long_description = README.read_text() if README.exists() else ""

# Read version from package
version = "1.0.0"

setup(
    name="ark-serman",
    version=version,
    description="ark-serman - Manage Ark dedicated servers running as systemd user services",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="Apache-2.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "arkserman": [
            "web/templates/*.html",
            "web/static/*",
        ],
    },
    include_package_data=True,
    install_requires=[
        "Flask>=2.2",
        "PyYAML>=6.0",
        "rcon>=2.1",
        "sdbus>=0.11",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ark-serman=arkserman.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Monitoring",
        "Topic :: Games/Entertainment",
    ],
    python_requires=">=3.10",
)
