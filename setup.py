#!/usr/bin/env python3
"""
Redis-Cache Setup Script
========================
Allows installation of the redis-cache package.

Usage:
    pip install -e .            # Development install
    pip install -e ".[test]"    # Development install with test tools
    pip install .               # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="redis-cache",
    version="1.0.0",
    packages=find_packages(include=["redis_cache", "redis_cache.*"]),
    python_requires=">=3.10",
    install_requires=[
        "redis>=5.0,<8",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "redis-cache=redis_cache.cli:main",
        ],
    },
)
