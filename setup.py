#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
"""The setup.py file."""

import os
import sys

from setuptools import find_packages, setup
from setuptools.command.install import install

with open("src/xgw3_rf/version.py") as fh:
    for line in fh:
        if line.strip().startswith("__version__"):
            VERSION = line.split("=")[-1].strip().strip("\"'")
            break

URL = "https://github.com/xgw3/xgw3_rf"

LONG_DESCRIPTION = (
    "A decoder for the local message bus of the Xiaomi Gateway 3 (zigbee & bluetooth"
    " devices), with a device specification registry and a state model."
)


class VerifyVersionCommand(install):
    """Custom command to verify that the git tag matches our VERSION."""

    def run(self):
        tag = os.getenv("CIRCLE_TAG")
        if tag != VERSION:
            info = f"Git tag: {tag} does not match the version of this pkg: {VERSION}"
            sys.exit(info)


setup(
    name="xiaomi-gw3",
    description="A decoder for the Xiaomi Gateway 3 local message bus.",
    keywords=["xiaomi", "aqara", "gateway3", "zigbee", "mibeacon"],
    url=URL,
    download_url=f"{URL}/archive/{VERSION}.tar.gz",
    install_requires=[
        "click>=8.1",
        "colorama>=0.4.6",
        "colorlog>=6.8",
        "paho-mqtt>=2.0",
        "PyYAML>=6.0",
        "voluptuous>=0.13.1",
    ],
    extras_require={
        "test": ["pytest>=8.0", "pytest-asyncio>=0.24"],
    },
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src", exclude=["tests", "docs"]),
    entry_points={
        "console_scripts": ["xgw3_client = xgw3_cli.client:main"],
    },
    version=VERSION,
    license="MIT",
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.11",
        "Topic :: Home Automation",
    ],
    cmdclass={
        "verify": VerifyVersionCommand,
    },
)
