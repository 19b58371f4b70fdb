"""
setup.py

Package installer configuration for the flip animation core.
This file defines the package metadata, dependencies, and build settings
required for installing the flip_animation library.

The source modules live under src/ and are discovered automatically.
"""

from setuptools import setup, find_packages

# Read the long description from the project README for PyPI display.
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="flip-animation",
    version="0.1.0",
    description="Two-phase flip animation core: easing, face transforms and visibility",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # All importable packages are located inside the src/ directory.
    package_dir={"": "src"},
    packages=find_packages(where="src"),

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Multimedia :: Graphics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.10",

    # numpy/scipy for the transform math, matplotlib for profile plots.
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.7.0",
        "matplotlib>=3.3.0",
    ],

    # Optional dependency groups for development.
    extras_require={
        "dev": ["pytest>=6.0", "pytest-cov", "black", "flake8"],
    },
)
