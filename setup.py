"""Setup file for editable install compatibility."""
from setuptools import setup, find_packages

setup(
    name="mc-frontier",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.20",
        "pandas>=1.3",
        "matplotlib>=3.4",
        "openpyxl>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "mc-frontier=mc_frontier.cli.main:main",
        ],
    },
    python_requires=">=3.8",
)
