"""
Setup script for the contact-finder project.

Allows development installation with `pip install -e .`
(add `[test]` for the test tooling).
"""

import os

from setuptools import setup, find_packages

_here = os.path.abspath(os.path.dirname(__file__))
_version: dict = {}
with open(os.path.join(_here, "version.py")) as f:
    exec(f.read(), _version)

setup(
    name="contact-finder",
    version=_version["__version__"],
    description="Decision-maker contact discovery, scoring and ranking",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0",
        "langchain-core>=0.2",
        "langchain-openai>=0.1",
        "tenacity>=8.2",
        "python-dotenv>=1.0",
        "json-repair>=0.25",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-mock>=3.12",
        ],
    },
)
