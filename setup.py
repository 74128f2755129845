#!/usr/bin/env python
# -*- coding: utf-8 -*-
# read the contents of your README file
from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

lint_deps = ["flake8", "mypy", "types-requests"]
test_deps = ["pytest", "responses>=0.22", "httpretty"]

setup(
    name="geodetect",
    version="1.0.0",
    description="Client for a remote geospatial detection API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "requests",
        # We use the new `allowed_methods` option
        "urllib3>=1.26.0",
    ],
    extras_require={
        "test": test_deps,
        "lint": lint_deps,
    },
)
