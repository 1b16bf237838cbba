from codecs import open
from os import path

from setuptools import find_packages, setup

here = path.abspath(path.dirname(__file__))

with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="nextbundle",
    version="0.1.0",
    packages=find_packages(exclude=["contrib", "docs", "tests*"]),
    description="Next.js bundle size comparison comments for pull requests",
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.11",
    install_requires=[
        "cerberus",
        "inflect",
        "orjson",
        "pyyaml",
        "sentry-sdk>=2.13.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "nextbundle-compare=nextbundle.cli:main",
        ],
    },
)
