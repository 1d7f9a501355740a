"""Setup script for permflow Python package."""

from setuptools import setup, find_packages

setup(
    name="permflow",
    version="0.1.0",
    description="permflow - Runtime permission request coordination",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=["pyyaml"],
    extras_require={
        "dev": ["pytest", "pytest-asyncio", "black", "mypy"],
    },
)
