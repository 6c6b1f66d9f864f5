"""
Setup script for localpdf.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages

setup(
    name="localpdf",
    version="0.3.0",
    description="Local PDF job engine: combine, extract, shrink and rasterize documents without uploading them",
    author="localpdf Contributors",
    author_email="",
    package_dir={"": "packages"},
    packages=find_packages("packages"),
    install_requires=[
        "pypdf[crypto]>=5.0.0",
        "PyMuPDF>=1.23.0",
        "click>=8.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "localpdf=localpdf.cli.main:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf merge combine extract pages compress rasterize zip offline",
    include_package_data=True,
    zip_safe=False,
)
