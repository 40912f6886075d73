#!/usr/bin/env python3
"""
Setup script for EONAC - Elastic Optical Network Admission Control.

This package decides which connection requests an elastic optical network
admits and assigns each admitted request a path, a contiguous slot range
and a type-segregated spectrum zone.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "EONAC - Elastic Optical Network Admission Control"

setup(
    name="eonac",
    version="1.0.0",
    author="EONAC Development Team",
    description="Admission control and spectrum assignment for elastic optical networks",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests*', '*.tests', '*.tests.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "Topic :: System :: Networking",
        "Topic :: Scientific/Engineering",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=[
        "networkx>=3.2.1",
        "numpy>=1.26.3",
        "PyYAML>=6.0.1",
    ],
    extras_require={
        "dev": [
            "pytest>=8.3.4",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "eonac-solve=eonac.cli.run_solve:main",
        ],
    },
    package_data={
        "eonac": [
            "data/*.yaml",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords="optical networks, elastic optical networks, spectrum assignment, admission control",
)
