"""
Setup script for the sipsense package
"""

from setuptools import find_packages, setup


with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="sipsense",
    version="0.1.0",
    description="Context-aware drink recommendations and wellness notifications",
    packages=find_packages(include=["sipsense", "sipsense.*"]),
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "freezegun>=1.2",
        ],
    },
    entry_points={
        "console_scripts": [
            "sipsense=sipsense.cli:app",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
