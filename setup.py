"""
Setup script for gasmix_mc package.

Installation:
    pip install -e .
"""

from setuptools import setup, find_packages

setup(
    name="gasmix_mc",
    version="0.1.0",
    description="Electron and photon collision tables for Monte Carlo transport in gas mixtures",
    packages=find_packages(include=["gasmix_mc", "gasmix_mc.*"]),
    package_data={"gasmix_mc": ["data/*.yaml"]},
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.24",
        "scipy>=1.10",
        "matplotlib>=3.7",
        "numba>=0.58",
        "pyyaml>=6.0",
        "tqdm>=4.65",
    ],
    extras_require={
        "dev": ["pytest>=7.3", "black>=23.0", "mypy>=1.3", "ipython>=8.12"],
    },
)
